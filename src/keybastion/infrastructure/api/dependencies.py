"""FastAPI dependencies for authentication and service construction.

Long-lived components live on ``app.state`` and are created by the app
factory. Request-scoped services are built here from those components and
the request's database session.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from keybastion.application.services.auth_gateway import AuthGateway
from keybastion.application.services.credential_service import CredentialService
from keybastion.application.services.pin_gate import PinGate
from keybastion.core.logging import get_logger
from keybastion.domain.services.password_forge import PasswordForge
from keybastion.infrastructure.auth import (
    CurrentPrincipal,
    SessionRegistry,
    TokenAuthority,
    TokenError,
)
from keybastion.infrastructure.persistence.database import get_db_session
from keybastion.infrastructure.persistence.repositories import (
    CredentialRepository,
    PrincipalRepository,
    SharingRepository,
)
from keybastion.infrastructure.security.secret_cipher import SecretCipher

logger = get_logger(__name__)


def get_token_authority(request: Request) -> TokenAuthority:
    """Get the shared token authority from app state."""
    return request.app.state.token_authority


def get_session_registry(request: Request) -> SessionRegistry:
    """Get the shared session registry from app state."""
    return request.app.state.session_registry


def get_secret_cipher(request: Request) -> SecretCipher:
    """Get the shared secret cipher from app state."""
    return request.app.state.secret_cipher


def get_password_forge(request: Request) -> PasswordForge:
    """Get the shared password forge from app state."""
    return request.app.state.password_forge


def get_auth_gateway(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    token_authority: Annotated[TokenAuthority, Depends(get_token_authority)],
    session_registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> AuthGateway:
    """Build the authentication gateway for this request."""
    return AuthGateway(
        principals=PrincipalRepository(session),
        token_authority=token_authority,
        session_registry=session_registry,
    )


def get_pin_gate(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    secret_cipher: Annotated[SecretCipher, Depends(get_secret_cipher)],
) -> PinGate:
    """Build the PIN gate for this request."""
    return PinGate(
        principals=PrincipalRepository(session),
        credentials=CredentialRepository(session),
        sharings=SharingRepository(session),
        secret_cipher=secret_cipher,
    )


def get_credential_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    secret_cipher: Annotated[SecretCipher, Depends(get_secret_cipher)],
    password_forge: Annotated[PasswordForge, Depends(get_password_forge)],
) -> CredentialService:
    """Build the credential service for this request."""
    return CredentialService(
        credentials=CredentialRepository(session),
        secret_cipher=secret_cipher,
        password_forge=password_forge,
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from a ``Bearer <token>`` header value, or None."""
    if authorization is None:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


async def get_current_principal(
    gateway: Annotated[AuthGateway, Depends(get_auth_gateway)],
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentPrincipal:
    """Extract and validate the current principal from the Authorization header.

    Invalid, expired and revoked tokens all produce the same response.

    Raises:
        HTTPException: 401 if the token is missing or not usable.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = extract_bearer_token(authorization)
    if token is None:
        logger.info("Authentication failed: missing or malformed Authorization header")
        raise credentials_exception

    try:
        claims = gateway.authenticate(token)
    except TokenError as e:
        logger.info("Authentication failed", reason=type(e).__name__)
        raise credentials_exception from e

    return CurrentPrincipal(
        user_id=claims.user_id,
        username=claims.username,
        roles=list(claims.roles),
        token_id=claims.token_id,
    )


# Type aliases for dependency injection
AuthenticatedPrincipal = Annotated[CurrentPrincipal, Depends(get_current_principal)]
AuthGatewayDep = Annotated[AuthGateway, Depends(get_auth_gateway)]
PinGateDep = Annotated[PinGate, Depends(get_pin_gate)]
CredentialServiceDep = Annotated[CredentialService, Depends(get_credential_service)]
PasswordForgeDep = Annotated[PasswordForge, Depends(get_password_forge)]
