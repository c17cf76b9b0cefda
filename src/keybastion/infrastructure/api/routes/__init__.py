"""API Routes for KeyBastion."""

from keybastion.infrastructure.api.routes.auth_router import router as auth_router
from .credential_security_router import router as credential_security_router
from .credentials_router import router as credentials_router
from .passwords_router import router as passwords_router

__all__ = [
    "auth_router",
    "credential_security_router",
    "credentials_router",
    "passwords_router",
]
