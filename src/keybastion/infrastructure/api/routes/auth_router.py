"""Authentication API routes.

Provides endpoints for registration, login, token refresh, token validation
and logout.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from keybastion.application.services.auth_gateway import (
    AuthenticationFailedError,
    ConflictError,
    LoginResult,
)
from keybastion.core.logging import get_logger
from keybastion.infrastructure.api.dependencies import (
    AuthGatewayDep,
    extract_bearer_token,
)
from keybastion.infrastructure.api.schemas import (
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
from keybastion.infrastructure.auth import TokenError
from keybastion.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

router = APIRouter()


def _jwt_response(result: LoginResult) -> JwtResponse:
    return JwtResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        expires_in=result.expires_in,
        username=result.principal.username,
        roles=[result.principal.role.authority],
    )


def _unauthorized(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": "Authentication failed", "message": message},
    )


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=JwtResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
async def login(
    request: LoginRequest,
    gateway: AuthGatewayDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> JwtResponse | JSONResponse:
    """Authenticate with username and password and return a token pair.

    All authentication failures return the same generic 401 message.
    """
    try:
        result = await gateway.login(request.username, request.password)
    except AuthenticationFailedError as e:
        return _unauthorized(str(e))

    # Persist a possible password hash upgrade
    await session.commit()
    return _jwt_response(result)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=JwtResponse,
    responses={409: {"model": ConflictErrorResponse, "description": "Username or email exists"}},
)
async def register(
    request: RegisterRequest,
    gateway: AuthGatewayDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> JwtResponse | JSONResponse:
    """Register a new USER principal and return its first token pair."""
    try:
        result = await gateway.register_and_login(
            request.username, request.password, str(request.email)
        )
    except ConflictError as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": "Conflict", "message": e.message, "field": e.field},
        )

    await session.commit()
    return _jwt_response(result)


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=TokenRefreshResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid refresh token"}},
)
async def refresh(
    request: RefreshRequest,
    gateway: AuthGatewayDep,
) -> TokenRefreshResponse | JSONResponse:
    """Exchange a refresh token for a new access token and refresh token.

    The presented refresh token is consumed; reusing it fails.
    """
    try:
        result = await gateway.refresh(request.refresh_token)
    except AuthenticationFailedError:
        return _unauthorized("Invalid or expired refresh token")

    return TokenRefreshResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        expires_in=result.expires_in,
    )


@router.post(
    "/validate",
    status_code=status.HTTP_200_OK,
    response_model=TokenValidationResponse,
)
async def validate(
    request: TokenValidationRequest,
    gateway: AuthGatewayDep,
) -> TokenValidationResponse:
    """Report whether an access token is currently valid."""
    result = gateway.validate(request.token)
    return TokenValidationResponse(
        valid=result.valid,
        expires_in=result.expires_in,
        username=result.username,
        roles=result.roles,
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"description": "Missing or invalid access token"}},
)
async def logout(
    gateway: AuthGatewayDep,
    request: LogoutRequest | None = None,
    authorization: Annotated[str | None, Header()] = None,
) -> Response:
    """Revoke the caller's access token and drop the supplied refresh token.

    An expired access token is still accepted here as long as its signature
    verifies.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Could not validate credentials"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        gateway.logout(token, request.refresh_token if request else None)
    except TokenError as e:
        logger.info("Logout failed", reason=type(e).__name__)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Could not validate credentials"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
