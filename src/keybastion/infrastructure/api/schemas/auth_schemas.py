"""Pydantic schemas for authentication endpoints.

Login and registration responses use snake_case keys; refresh, validate and
logout use camelCase keys.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Request body for login."""

    username: str = Field(..., min_length=1, description="Login name")
    password: str = Field(..., min_length=1, description="Login password")


class RegisterRequest(BaseModel):
    """Request body for registration. New principals always get the USER role."""

    username: str = Field(..., min_length=1, max_length=100, description="Login name")
    password: str = Field(..., min_length=1, description="Login password")
    email: EmailStr = Field(..., description="Email address")


class JwtResponse(BaseModel):
    """Response for successful login or registration."""

    access_token: str = Field(..., description="Signed access token")
    refresh_token: str = Field(..., description="Opaque single-use refresh token")
    token_type: str = Field("Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    username: str = Field(..., description="Username of the principal")
    roles: list[str] = Field(..., description="Granted authorities, e.g. ROLE_USER")


class RefreshRequest(BaseModel):
    """Request body carrying a refresh token."""

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(..., min_length=1, alias="refreshToken")


class LogoutRequest(BaseModel):
    """Optional request body for logout."""

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str | None = Field(None, alias="refreshToken")


class TokenRefreshResponse(BaseModel):
    """Response for a successful refresh."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")
    token_type: str = Field("Bearer", alias="tokenType")
    expires_in: int = Field(..., alias="expiresIn")


class TokenValidationRequest(BaseModel):
    """Request body for token validation."""

    token: str = Field(..., min_length=1, description="Access token to check")


class TokenValidationResponse(BaseModel):
    """Result of a token validation."""

    model_config = ConfigDict(populate_by_name=True)

    valid: bool
    expires_in: int = Field(0, alias="expiresIn")
    username: str | None = None
    roles: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Generic error body."""

    error: str = Field(..., description="Error type")
    message: str | None = Field(None, description="Human-readable error message")


class ConflictErrorResponse(BaseModel):
    """Response for conflict errors (duplicate resources)."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    field: str = Field(..., description="Field that caused the conflict")
