"""Domain entities for KeyBastion.

They have no dependencies on infrastructure or external frameworks.
"""

from keybastion.domain.entities.role import AUTHORITY_PREFIX, Role

__all__ = [
    "AUTHORITY_PREFIX",
    "Role",
]
