"""API Schemas for request/response validation."""

from keybastion.infrastructure.api.schemas.auth_schemas import (
    ConflictErrorResponse,
    ErrorResponse,
    JwtResponse,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    TokenRefreshResponse,
    TokenValidationRequest,
    TokenValidationResponse,
)
from keybastion.infrastructure.api.schemas.credential_schemas import (
    PROTECTED_PLACEHOLDER,
    CredentialResponse,
    SaveCredentialRequest,
)
from keybastion.infrastructure.api.schemas.password_schemas import (
    PasswordEvaluationRequest,
    PasswordEvaluationResponse,
    PasswordGenerationRequest,
    PasswordGenerationResponse,
)
from keybastion.infrastructure.api.schemas.pin_schemas import (
    PinRequest,
    PinRequiredResponse,
    RevealResponse,
    SetPinResponse,
)

__all__ = [
    "ConflictErrorResponse",
    "CredentialResponse",
    "ErrorResponse",
    "JwtResponse",
    "LoginRequest",
    "LogoutRequest",
    "PROTECTED_PLACEHOLDER",
    "PasswordEvaluationRequest",
    "PasswordEvaluationResponse",
    "PasswordGenerationRequest",
    "PasswordGenerationResponse",
    "PinRequest",
    "PinRequiredResponse",
    "RefreshRequest",
    "RegisterRequest",
    "RevealResponse",
    "SaveCredentialRequest",
    "SetPinResponse",
    "TokenRefreshResponse",
    "TokenValidationRequest",
    "TokenValidationResponse",
]
