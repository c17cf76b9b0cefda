"""Domain services for KeyBastion.

Services contain business logic that doesn't naturally fit within a single entity.
They have no dependencies on infrastructure or external frameworks.
"""

from keybastion.domain.services.password_forge import (
    DEFAULT_LENGTH,
    MAX_LENGTH,
    MIN_LENGTH,
    GenerationOptions,
    InvalidParametersError,
    PasswordForge,
    default_password_forge,
)

__all__ = [
    "DEFAULT_LENGTH",
    "GenerationOptions",
    "InvalidParametersError",
    "MAX_LENGTH",
    "MIN_LENGTH",
    "PasswordForge",
    "default_password_forge",
]
