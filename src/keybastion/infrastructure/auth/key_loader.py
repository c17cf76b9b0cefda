"""Loading of the RSA key pair used to sign access tokens.

Key material comes from PEM files named in the settings. When no files are
configured an ephemeral pair is generated, which is only suitable for
development: tokens stop verifying after a restart.
"""

from dataclasses import dataclass
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from keybastion.core.logging import get_logger

logger = get_logger(__name__)

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


class KeyMaterialError(Exception):
    """Raised when signing keys are missing, unreadable or mismatched."""

    pass


@dataclass(frozen=True)
class SigningKeys:
    """An RSA key pair for RS256 signing and verification."""

    private_key: rsa.RSAPrivateKey
    public_key: rsa.RSAPublicKey


def generate_signing_keys() -> SigningKeys:
    """Generate a new 2048-bit RSA key pair."""
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT, key_size=RSA_KEY_SIZE
    )
    return SigningKeys(private_key=private_key, public_key=private_key.public_key())


def private_key_to_pem(private_key: rsa.RSAPrivateKey) -> bytes:
    """Serialize a private key as unencrypted PKCS#8 PEM."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_key_to_pem(public_key: rsa.RSAPublicKey) -> bytes:
    """Serialize a public key as SubjectPublicKeyInfo PEM."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def keys_from_pem(private_pem: bytes, public_pem: bytes) -> SigningKeys:
    """Parse a PEM encoded key pair and check that the halves match.

    Raises:
        KeyMaterialError: If either key cannot be parsed, is not RSA, or the
            public key does not belong to the private key.
    """
    try:
        private_key = serialization.load_pem_private_key(private_pem, password=None)
        public_key = serialization.load_pem_public_key(public_pem)
    except (ValueError, TypeError) as e:
        raise KeyMaterialError("Unable to parse RSA key material") from e

    if not isinstance(private_key, rsa.RSAPrivateKey) or not isinstance(
        public_key, rsa.RSAPublicKey
    ):
        raise KeyMaterialError("Signing keys must be RSA keys")

    if private_key.public_key().public_numbers() != public_key.public_numbers():
        raise KeyMaterialError("Public key does not match private key")

    return SigningKeys(private_key=private_key, public_key=public_key)


def load_signing_keys(
    private_key_path: str | None, public_key_path: str | None
) -> SigningKeys:
    """Load the signing key pair from PEM files, or generate an ephemeral one.

    Args:
        private_key_path: Path to the private key PEM, or None.
        public_key_path: Path to the public key PEM, or None.

    Returns:
        The loaded or generated key pair.

    Raises:
        KeyMaterialError: If only one path is configured, a file is
            unreadable, or the keys are invalid.
    """
    if not private_key_path and not public_key_path:
        logger.warning(
            "No RSA key files configured, generating ephemeral signing keys",
            key_size=RSA_KEY_SIZE,
        )
        return generate_signing_keys()

    if not private_key_path or not public_key_path:
        raise KeyMaterialError("Both RSA private and public key paths must be configured")

    try:
        private_pem = Path(private_key_path).read_bytes()
        public_pem = Path(public_key_path).read_bytes()
    except OSError as e:
        raise KeyMaterialError("Unable to read RSA key files") from e

    keys = keys_from_pem(private_pem, public_pem)
    logger.info(
        "RSA signing keys loaded",
        private_key_path=private_key_path,
        public_key_path=public_key_path,
    )
    return keys


def write_signing_keys(keys: SigningKeys, directory: Path) -> tuple[Path, Path]:
    """Write a key pair to ``private.pem`` and ``public.pem`` in a directory.

    Returns:
        Tuple of (private key path, public key path).
    """
    directory.mkdir(parents=True, exist_ok=True)
    private_path = directory / "private.pem"
    public_path = directory / "public.pem"
    private_path.write_bytes(private_key_to_pem(keys.private_key))
    private_path.chmod(0o600)
    public_path.write_bytes(public_key_to_pem(keys.public_key))
    return private_path, public_path
