"""Persistence repositories for database operations."""

from keybastion.infrastructure.persistence.repositories.credential_repository import (
    CredentialRepository,
)
from keybastion.infrastructure.persistence.repositories.principal_repository import (
    PrincipalRepository,
)
from keybastion.infrastructure.persistence.repositories.sharing_repository import (
    SharingRepository,
)

__all__ = [
    "CredentialRepository",
    "PrincipalRepository",
    "SharingRepository",
]
