"""Access token signing and verification.

Access tokens are RS256 JWTs signed with the process-wide private key and
verified with the matching public key. Verification covers signature,
issuer and expiry only; revocation lives in the session registry.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa
from pydantic import ValidationError

from keybastion.domain.entities.role import Role
from keybastion.infrastructure.auth.token_types import AccessClaims, MintedToken


class TokenError(Exception):
    """Base exception for access token failures."""

    pass


class InvalidSignatureError(TokenError):
    """Raised when a token is malformed or its signature does not verify."""

    pass


class TokenExpiredError(TokenError):
    """Raised when the current time is at or past the token's expiry."""

    pass


class TokenRevokedError(TokenError):
    """Raised when a token's identifier is on the revocation list."""

    pass


class TokenAuthority:
    """Mints and verifies access tokens.

    Holds only immutable key material and settings, so one instance is
    shared by every request.
    """

    ALGORITHM = "RS256"
    REQUIRED_CLAIMS = ["iss", "sub", "iat", "exp", "jti"]

    def __init__(
        self,
        private_key: rsa.RSAPrivateKey,
        public_key: rsa.RSAPublicKey,
        issuer: str = "keybastion",
        access_token_ttl: timedelta = timedelta(minutes=30),
    ) -> None:
        """Initialize the token authority.

        Args:
            private_key: RSA key used to sign tokens.
            public_key: RSA key used to verify tokens.
            issuer: Value of the ``iss`` claim.
            access_token_ttl: Default access token lifetime.
        """
        self._private_key = private_key
        self._public_key = public_key
        self.issuer = issuer
        self.access_token_ttl = access_token_ttl

    @property
    def expires_in(self) -> int:
        """Default access token lifetime in seconds."""
        return int(self.access_token_ttl.total_seconds())

    def mint(
        self,
        principal_id: str,
        username: str,
        roles: Iterable[Role],
        ttl: timedelta | None = None,
    ) -> MintedToken:
        """Create a signed access token.

        Args:
            principal_id: The principal's unique identifier.
            username: The principal's username, used as the subject.
            roles: Roles to embed in the ``roles`` claim.
            ttl: Custom lifetime. Defaults to the configured access TTL.

        Returns:
            The encoded token with its id and expiry.
        """
        if ttl is None:
            ttl = self.access_token_ttl

        now = datetime.now(timezone.utc).replace(microsecond=0)
        expire = now + ttl
        token_id = uuid.uuid4().hex

        payload = {
            "iss": self.issuer,
            "sub": username,
            "iat": now,
            "exp": expire,
            "jti": token_id,
            "roles": [role.claim for role in roles],
            "username": username,
            "userId": principal_id,
        }

        token = jwt.encode(payload, self._private_key, algorithm=self.ALGORITHM)
        return MintedToken(
            token=token,
            token_id=token_id,
            expires_at=expire,
            expires_in=int(ttl.total_seconds()),
        )

    def decode(self, token: str, verify_exp: bool = True) -> dict[str, Any]:
        """Verify a token and return its raw payload.

        Raises:
            TokenExpiredError: If ``verify_exp`` is set and the token expired.
            InvalidSignatureError: For any other verification failure.
        """
        try:
            return jwt.decode(
                token,
                self._public_key,
                algorithms=[self.ALGORITHM],
                issuer=self.issuer,
                options={"require": self.REQUIRED_CLAIMS, "verify_exp": verify_exp},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidSignatureError("Invalid token") from e

    def verify(self, token: str, verify_exp: bool = True) -> AccessClaims:
        """Verify a token and return its claims.

        Revocation is not checked here; see
        :meth:`SessionRegistry.is_revoked`.

        Args:
            token: The encoded access token.
            verify_exp: Whether to reject expired tokens. Only logout
                disables this.

        Returns:
            The verified claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidSignatureError: If the token is malformed, has a bad
                signature, a wrong issuer or missing claims.
        """
        payload = self.decode(token, verify_exp=verify_exp)
        try:
            return AccessClaims(
                issuer=payload["iss"],
                subject=payload["sub"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                token_id=payload["jti"],
                roles=payload.get("roles", []),
                username=payload.get("username", payload["sub"]),
                user_id=payload["userId"],
            )
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise InvalidSignatureError("Invalid token claims") from e
