"""Authentication gateway.

Login, registration, token refresh, logout and access token checks. Access
tokens come from the token authority; refresh tokens and revocations live in
the session registry.
"""

import uuid
from dataclasses import dataclass, field

from keybastion.core.logging import get_logger
from keybastion.domain.entities.role import Role
from keybastion.infrastructure.auth import (
    DUMMY_PASSWORD_HASH,
    AccessClaims,
    SessionError,
    SessionRegistry,
    TokenAuthority,
    TokenError,
    TokenRevokedError,
    hash_password,
    needs_rehash,
    verify_password,
)
from keybastion.infrastructure.persistence.models import PrincipalModel
from keybastion.infrastructure.persistence.repositories import PrincipalRepository

logger = get_logger(__name__)

GENERIC_LOGIN_FAILURE = "Invalid username or password"


class AuthGatewayError(Exception):
    """Base exception for authentication gateway failures."""

    pass


class AuthenticationFailedError(AuthGatewayError):
    """Raised for any failed login or refresh. The message stays generic."""

    pass


class ConflictError(AuthGatewayError):
    """Raised when a username or email is already registered."""

    def __init__(self, message: str, field: str) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


@dataclass(frozen=True)
class LoginResult:
    """Tokens issued on login or registration."""

    access_token: str
    refresh_token: str
    expires_in: int
    principal: PrincipalModel


@dataclass(frozen=True)
class RefreshResult:
    """A rotated token pair."""

    access_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True)
class TokenValidation:
    """Outcome of a token validity check."""

    valid: bool
    expires_in: int = 0
    username: str | None = None
    roles: list[str] = field(default_factory=list)


class AuthGateway:
    """Entry point for every authentication decision."""

    def __init__(
        self,
        principals: PrincipalRepository,
        token_authority: TokenAuthority,
        session_registry: SessionRegistry,
    ) -> None:
        """Initialize the gateway.

        Args:
            principals: Repository for principal lookups.
            token_authority: Signs and verifies access tokens.
            session_registry: Refresh token and revocation store.
        """
        self.principals = principals
        self.token_authority = token_authority
        self.session_registry = session_registry

    def _issue_pair(self, principal: PrincipalModel) -> LoginResult:
        minted = self.token_authority.mint(
            principal_id=principal.id,
            username=principal.username,
            roles=[principal.role],
        )
        refresh_token = self.session_registry.issue_refresh(principal.id)
        return LoginResult(
            access_token=minted.token,
            refresh_token=refresh_token,
            expires_in=minted.expires_in,
            principal=principal,
        )

    async def login(self, username: str, password: str) -> LoginResult:
        """Check a username and password and issue a token pair.

        The password is always run through Argon2, even for unknown users,
        so both failure paths take the same time.

        Args:
            username: Login name.
            password: Plaintext password.

        Returns:
            Access token, refresh token, lifetime and the principal.

        Raises:
            AuthenticationFailedError: If the user is unknown or the password
                is wrong. The message does not say which.
        """
        principal = await self.principals.get_by_username(username)

        if principal is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("Login failed: user not found", username=username)
            raise AuthenticationFailedError(GENERIC_LOGIN_FAILURE)

        if not verify_password(password, principal.password_hash):
            logger.info("Login failed: invalid password", principal_id=principal.id)
            raise AuthenticationFailedError(GENERIC_LOGIN_FAILURE)

        if needs_rehash(principal.password_hash):
            await self.principals.update_password_hash(principal.id, hash_password(password))
            logger.debug("Password hash upgraded", principal_id=principal.id)

        result = self._issue_pair(principal)
        logger.info("Principal logged in", principal_id=principal.id)
        return result

    async def register(
        self,
        username: str,
        password: str,
        email: str,
        role: Role = Role.USER,
    ) -> PrincipalModel:
        """Create a principal with a hashed password.

        Raises:
            ConflictError: If the username or email is taken.
        """
        if await self.principals.username_exists(username):
            logger.info("Registration failed: username exists", username=username)
            raise ConflictError("Username is already taken", field="username")

        if await self.principals.email_exists(email):
            logger.info("Registration failed: email exists", email=email)
            raise ConflictError("Email is already registered", field="email")

        principal = PrincipalModel(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=role,
        )
        await self.principals.create(principal)
        logger.info("Principal registered", principal_id=principal.id, role=role.value)
        return principal

    async def register_and_login(
        self, username: str, password: str, email: str
    ) -> LoginResult:
        """Register a USER principal and issue its first token pair."""
        principal = await self.register(username, password, email)
        return self._issue_pair(principal)

    async def refresh(self, refresh_token: str) -> RefreshResult:
        """Rotate a refresh token and mint a new access token.

        Args:
            refresh_token: The single-use token issued earlier.

        Returns:
            The new access token and the replacement refresh token.

        Raises:
            AuthenticationFailedError: If the refresh token is unknown, used,
                expired, or its principal no longer exists.
        """
        try:
            rotated = self.session_registry.redeem(refresh_token)
        except SessionError as e:
            logger.info("Refresh failed", reason=type(e).__name__)
            raise AuthenticationFailedError("Invalid refresh token") from e

        principal = await self.principals.get_by_id(rotated.principal_id)
        if principal is None:
            self.session_registry.invalidate_refresh(rotated.refresh_token)
            logger.warning(
                "Refresh failed: principal not found",
                principal_id=rotated.principal_id,
            )
            raise AuthenticationFailedError("Invalid refresh token")

        minted = self.token_authority.mint(
            principal_id=principal.id,
            username=principal.username,
            roles=[principal.role],
        )
        logger.info("Tokens refreshed", principal_id=principal.id)
        return RefreshResult(
            access_token=minted.token,
            refresh_token=rotated.refresh_token,
            expires_in=minted.expires_in,
        )

    def logout(self, access_token: str, refresh_token: str | None = None) -> None:
        """Revoke an access token and drop its refresh token.

        The refresh token is only dropped when it belongs to the principal
        named by the access token.

        The signature must still verify, but an expired access token is
        accepted so a client can always log out.

        Raises:
            InvalidSignatureError: If the access token does not verify.
        """
        claims = self.token_authority.verify(access_token, verify_exp=False)
        self.session_registry.revoke_access(claims.token_id, claims.expires_at)
        if refresh_token:
            if not self.session_registry.invalidate_refresh(
                refresh_token, principal_id=claims.user_id
            ):
                logger.warning(
                    "Logout refresh token not dropped",
                    principal_id=claims.user_id,
                )
        logger.info("Principal logged out", principal_id=claims.user_id)

    def authenticate(self, access_token: str) -> AccessClaims:
        """Verify an access token and check it has not been revoked.

        Raises:
            InvalidSignatureError: Bad signature, malformed token or claims.
            TokenExpiredError: The token is past its expiry.
            TokenRevokedError: The token was revoked by logout.
        """
        claims = self.token_authority.verify(access_token)
        if self.session_registry.is_revoked(claims.token_id):
            raise TokenRevokedError("Token has been revoked")
        return claims

    def validate(self, token: str) -> TokenValidation:
        """Report whether a token is currently usable. Never raises."""
        try:
            claims = self.authenticate(token)
        except TokenError as e:
            logger.debug("Token validation failed", reason=type(e).__name__)
            return TokenValidation(valid=False)

        return TokenValidation(
            valid=True,
            expires_in=claims.seconds_remaining(),
            username=claims.username,
            roles=[role.claim for role in claims.roles],
        )
