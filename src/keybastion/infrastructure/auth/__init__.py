"""Authentication infrastructure components.

This module provides password hashing, access token signing and the
refresh token / revocation registry.
"""

from keybastion.infrastructure.auth.key_loader import (
    KeyMaterialError,
    SigningKeys,
    generate_signing_keys,
    load_signing_keys,
)
from keybastion.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    hash_pin,
    needs_rehash,
    verify_password,
    verify_pin,
)
from keybastion.infrastructure.auth.session_registry import (
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
    RotatedRefresh,
    SessionError,
    SessionRegistry,
)
from keybastion.infrastructure.auth.token_authority import (
    InvalidSignatureError,
    TokenAuthority,
    TokenError,
    TokenExpiredError,
    TokenRevokedError,
)
from keybastion.infrastructure.auth.token_types import (
    AccessClaims,
    CurrentPrincipal,
    MintedToken,
)

__all__ = [
    "AccessClaims",
    "CurrentPrincipal",
    "DUMMY_PASSWORD_HASH",
    "InvalidSignatureError",
    "KeyMaterialError",
    "MintedToken",
    "RefreshTokenExpiredError",
    "RefreshTokenNotFoundError",
    "RotatedRefresh",
    "SessionError",
    "SessionRegistry",
    "SigningKeys",
    "TokenAuthority",
    "TokenError",
    "TokenExpiredError",
    "TokenRevokedError",
    "generate_signing_keys",
    "hash_password",
    "hash_pin",
    "load_signing_keys",
    "needs_rehash",
    "verify_password",
    "verify_pin",
]
