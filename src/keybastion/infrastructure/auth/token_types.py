"""Token payload models for KeyBastion access tokens.

Defines the verified claims of an access token and the per-request
principal context derived from them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from keybastion.domain.entities.role import Role


class AccessClaims(BaseModel):
    """Verified claims carried by a KeyBastion access token."""

    model_config = ConfigDict(frozen=True)

    issuer: str = Field(..., description="Token issuer (iss)")
    subject: str = Field(..., description="Username of the principal (sub)")
    issued_at: datetime = Field(..., description="When the token was minted (iat)")
    expires_at: datetime = Field(..., description="When the token expires (exp)")
    token_id: str = Field(..., description="Unique token identifier used for revocation (jti)")
    roles: List[Role] = Field(default_factory=list, description="Roles granted to the principal")
    username: str = Field(..., description="Username of the principal")
    user_id: str = Field(..., description="Unique identifier of the principal")

    @field_validator("roles", mode="before")
    @classmethod
    def parse_roles(cls, v: list) -> list[Role]:
        """Accept bare or ``ROLE_`` prefixed role strings."""
        return [r if isinstance(r, Role) else Role.from_claim(r) for r in v or []]

    @property
    def authorities(self) -> list[str]:
        """Roles in their ``ROLE_`` prefixed authority form."""
        return [role.authority for role in self.roles]

    def seconds_remaining(self, now: datetime | None = None) -> int:
        """Whole seconds until expiry, never negative."""
        now = now or datetime.now(timezone.utc)
        return max(0, int((self.expires_at - now).total_seconds()))


@dataclass(frozen=True)
class MintedToken:
    """A freshly signed access token with its bookkeeping fields."""

    token: str
    token_id: str
    expires_at: datetime
    expires_in: int


@dataclass
class CurrentPrincipal:
    """The authenticated principal for the current request."""

    user_id: str
    username: str
    roles: List[Role] = field(default_factory=list)
    token_id: str | None = None

    @property
    def id(self) -> str:
        """Alias for user_id."""
        return self.user_id
