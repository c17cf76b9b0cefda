"""SQLAlchemy models for KeyBastion tables.

All models inherit from the Base class defined in database.py and are
created on application startup when missing.
"""

from keybastion.infrastructure.persistence.models.credential import CredentialModel
from keybastion.infrastructure.persistence.models.principal import PrincipalModel
from keybastion.infrastructure.persistence.models.sharing import SharingModel

__all__ = [
    "CredentialModel",
    "PrincipalModel",
    "SharingModel",
]
