"""Refresh token and revocation bookkeeping.

The only stateful part of the token scheme. Two maps are kept in memory:

- outstanding refresh tokens: id -> (principal id, expiry)
- revoked access token ids: jti -> natural expiry of the access token

Both are guarded by one lock. Redeeming a refresh token removes it and
issues its replacement in a single critical section, so a refresh token can
be redeemed at most once even under concurrent requests. The lock is never
held while awaiting I/O.
"""

import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from keybastion.core.logging import get_logger

logger = get_logger(__name__)

REFRESH_TOKEN_BYTES = 32


class SessionError(Exception):
    """Base exception for refresh token failures."""

    pass


class RefreshTokenNotFoundError(SessionError):
    """Raised when a refresh token is unknown or was already redeemed."""

    pass


class RefreshTokenExpiredError(SessionError):
    """Raised when a refresh token is past its expiry."""

    pass


@dataclass(frozen=True)
class RefreshEntry:
    """An outstanding refresh token."""

    principal_id: str
    expires_at: datetime


@dataclass(frozen=True)
class RotatedRefresh:
    """Outcome of a successful redemption."""

    principal_id: str
    refresh_token: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionRegistry:
    """Thread-safe in-memory store of refresh tokens and revoked access tokens."""

    def __init__(
        self,
        refresh_token_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the registry.

        Args:
            refresh_token_ttl: Lifetime of newly issued refresh tokens.
            clock: Returns the current aware UTC time.
        """
        self.refresh_token_ttl = refresh_token_ttl
        self._clock = clock
        self._refresh_tokens: dict[str, RefreshEntry] = {}
        self._revoked: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def _issue_locked(self, principal_id: str, now: datetime) -> str:
        token = secrets.token_urlsafe(REFRESH_TOKEN_BYTES)
        self._refresh_tokens[token] = RefreshEntry(
            principal_id=principal_id,
            expires_at=now + self.refresh_token_ttl,
        )
        return token

    def issue_refresh(self, principal_id: str) -> str:
        """Create and store a new refresh token for a principal.

        Args:
            principal_id: Owner of the new token.

        Returns:
            The opaque refresh token.
        """
        now = self._clock()
        with self._lock:
            token = self._issue_locked(principal_id, now)
        logger.debug("Refresh token issued", principal_id=principal_id)
        return token

    def redeem(self, refresh_token: str) -> RotatedRefresh:
        """Consume a refresh token and issue its replacement.

        Args:
            refresh_token: The token presented by the client.

        Returns:
            The owning principal and the new refresh token.

        Raises:
            RefreshTokenNotFoundError: If the token is unknown or already used.
            RefreshTokenExpiredError: If the token has expired. The expired
                entry is removed.
        """
        now = self._clock()
        with self._lock:
            entry = self._refresh_tokens.pop(refresh_token, None)
            if entry is None:
                raise RefreshTokenNotFoundError("Refresh token is not valid")
            if now >= entry.expires_at:
                raise RefreshTokenExpiredError("Refresh token has expired")
            new_token = self._issue_locked(entry.principal_id, now)

        logger.debug("Refresh token rotated", principal_id=entry.principal_id)
        return RotatedRefresh(principal_id=entry.principal_id, refresh_token=new_token)

    def invalidate_refresh(self, refresh_token: str, principal_id: str | None = None) -> bool:
        """Drop a refresh token without rotating it.

        Args:
            refresh_token: The token to drop.
            principal_id: When given, the token is only dropped if it belongs
                to this principal.

        Returns:
            True if a token was removed.
        """
        with self._lock:
            entry = self._refresh_tokens.get(refresh_token)
            if entry is not None and principal_id not in (None, entry.principal_id):
                entry = None
            if entry is not None:
                del self._refresh_tokens[refresh_token]
        if entry is not None:
            logger.info("Refresh token invalidated", principal_id=entry.principal_id)
        return entry is not None

    def revoke_access(self, token_id: str, natural_expiry: datetime) -> None:
        """Mark an access token as revoked until it would expire anyway.

        Idempotent; revoking twice keeps the later expiry.
        """
        with self._lock:
            current = self._revoked.get(token_id)
            if current is None or natural_expiry > current:
                self._revoked[token_id] = natural_expiry

    def is_revoked(self, token_id: str) -> bool:
        """Check whether an access token id has been revoked.

        Records past their natural expiry are dropped here; the token itself
        already fails its expiry check by then.
        """
        now = self._clock()
        with self._lock:
            expiry = self._revoked.get(token_id)
            if expiry is None:
                return False
            if now >= expiry:
                del self._revoked[token_id]
                return False
            return True

    def prune_expired(self) -> int:
        """Remove expired refresh tokens and revocation records.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        with self._lock:
            stale_refresh = [
                token for token, entry in self._refresh_tokens.items()
                if now >= entry.expires_at
            ]
            for token in stale_refresh:
                del self._refresh_tokens[token]

            stale_revoked = [
                token_id for token_id, expiry in self._revoked.items()
                if now >= expiry
            ]
            for token_id in stale_revoked:
                del self._revoked[token_id]

        removed = len(stale_refresh) + len(stale_revoked)
        if removed:
            logger.debug(
                "Pruned expired session entries",
                refresh_tokens=len(stale_refresh),
                revoked_tokens=len(stale_revoked),
            )
        return removed

    def outstanding_refresh_count(self) -> int:
        """Number of refresh tokens currently stored."""
        with self._lock:
            return len(self._refresh_tokens)

    def revoked_count(self) -> int:
        """Number of revocation records currently stored."""
        with self._lock:
            return len(self._revoked)
