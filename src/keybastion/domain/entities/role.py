"""Role entity for authorization.

Roles form a closed set. Access tokens carry the bare role name in their
``roles`` claim; authorization checks compare against the ``ROLE_``
prefixed authority form. Both conversions live here.
"""

from enum import Enum

AUTHORITY_PREFIX = "ROLE_"


class Role(str, Enum):
    """Principal role."""

    USER = "USER"
    ADMIN = "ADMIN"

    @property
    def claim(self) -> str:
        """Value written into the token ``roles`` claim."""
        return self.value

    @property
    def authority(self) -> str:
        """Prefixed authority string, e.g. ``ROLE_ADMIN``."""
        return f"{AUTHORITY_PREFIX}{self.value}"

    @classmethod
    def from_claim(cls, value: str) -> "Role":
        """Parse a role from a token claim or an authority string.

        Accepts ``ADMIN``, ``admin`` and ``ROLE_ADMIN``.

        Raises:
            ValueError: If the value does not name a known role.
        """
        if not isinstance(value, str):
            raise ValueError(f"Invalid role claim: {value!r}")
        name = value.strip().upper()
        if name.startswith(AUTHORITY_PREFIX):
            name = name[len(AUTHORITY_PREFIX):]
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown role: {value!r}") from None
