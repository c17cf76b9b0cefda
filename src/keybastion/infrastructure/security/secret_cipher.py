"""Symmetric encryption of credential secrets at rest.

Secrets are encrypted with AES-256 in ECB mode with PKCS7 padding and
stored as standard Base64. The mode is deterministic: the same plaintext
under the same key always yields the same ciphertext.

The configured key string is turned into key bytes by a fixed rule: its
UTF-8 encoding is zero-padded or truncated to 32 bytes. This keeps existing
ciphertext readable; it is not a key derivation function.
"""

import base64
import binascii

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

KEY_LENGTH = 32
BLOCK_SIZE_BITS = 128


class CryptoError(Exception):
    """Raised when a secret cannot be encrypted or decrypted.

    The message never says why; the cause is chained for internal logs.
    """

    pass


def normalize_key(secret_key: str) -> bytes:
    """Pad with zero bytes or truncate the UTF-8 key to 32 bytes."""
    raw = secret_key.encode("utf-8")
    return raw[:KEY_LENGTH].ljust(KEY_LENGTH, b"\x00")


class SecretCipher:
    """Encrypts and decrypts credential secrets with one process-wide key."""

    def __init__(self, secret_key: str) -> None:
        """Initialize the cipher.

        Args:
            secret_key: Configured encryption key of any length.
        """
        if not isinstance(secret_key, str) or not secret_key:
            raise ValueError("Encryption key must be a non-empty string")
        self._key = normalize_key(secret_key)

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.ECB())

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a secret.

        Args:
            plaintext: The secret to protect.

        Returns:
            Base64 ciphertext.

        Raises:
            CryptoError: If the input is not a string.
        """
        if not isinstance(plaintext, str):
            raise CryptoError("Encryption failed")

        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = self._cipher().encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return base64.b64encode(ciphertext).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a secret produced by :meth:`encrypt`.

        Args:
            ciphertext: Base64 ciphertext.

        Returns:
            The original plaintext.

        Raises:
            CryptoError: On malformed Base64, a wrong key or corrupted data.
        """
        try:
            raw = base64.b64decode(ciphertext, validate=True)
            decryptor = self._cipher().decryptor()
            padded = decryptor.update(raw) + decryptor.finalize()

            unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
            data = unpadder.update(padded) + unpadder.finalize()
            return data.decode("utf-8")
        except (binascii.Error, ValueError, TypeError) as e:
            raise CryptoError("Decryption failed") from e
