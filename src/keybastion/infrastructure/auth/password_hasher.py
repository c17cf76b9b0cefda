"""Password and PIN hashing using Argon2.

Provides salted, irreversible hashing and constant-time verification using
the Argon2id algorithm. Login passwords and security PINs share the same
hasher but are stored in separate columns.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()

# Verified against when a login names an unknown user so both failure paths
# spend the same time hashing.
DUMMY_PASSWORD_HASH = _hasher.hash("keybastion-dummy-password")


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    Args:
        password: The plaintext password to hash.

    Returns:
        The hashed password string.

    Example:
        >>> hashed = hash_password("SecureP@ss123!")
        >>> hashed.startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a hash.

    Uses constant-time comparison to prevent timing attacks.

    Args:
        password: The plaintext password to verify.
        hashed: The hashed password to verify against.

    Returns:
        True if the password matches, False otherwise.
    """
    try:
        return _hasher.verify(hashed, password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a password hash needs to be rehashed with current parameters."""
    return _hasher.check_needs_rehash(hashed)


def hash_pin(pin: str) -> str:
    """Hash a security PIN. Format validation is the caller's job."""
    return _hasher.hash(pin)


def verify_pin(pin: str, hashed: str) -> bool:
    """Verify a security PIN against its stored hash."""
    return verify_password(pin, hashed)
