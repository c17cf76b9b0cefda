"""PIN gate in front of credential decryption.

A stored secret is only decrypted after the requesting principal proves
knowledge of their security PIN and is either the credential's owner or the
recipient of an accepted, unexpired sharing grant.
"""

import re
from datetime import date
from typing import Callable

from keybastion.core.logging import get_logger
from keybastion.infrastructure.auth import hash_pin, verify_pin
from keybastion.infrastructure.persistence.repositories import (
    CredentialRepository,
    PrincipalRepository,
    SharingRepository,
)
from keybastion.infrastructure.security.secret_cipher import SecretCipher

logger = get_logger(__name__)

PIN_PATTERN = re.compile(r"^[0-9]{4,6}$")


class PinGateError(Exception):
    """Base exception for PIN gate failures."""

    pass


class PinNotSetError(PinGateError):
    """Raised when the principal has not configured a PIN yet."""

    pass


class PinMismatchError(PinGateError):
    """Raised when the supplied PIN is wrong."""

    pass


class InvalidPinFormatError(PinGateError):
    """Raised when a new PIN is not 4 to 6 digits."""

    pass


class CredentialNotFoundError(PinGateError):
    """Raised when a credential is missing or not accessible to the principal."""

    pass


class PinGate:
    """Authorizes reveals of stored secrets."""

    def __init__(
        self,
        principals: PrincipalRepository,
        credentials: CredentialRepository,
        sharings: SharingRepository,
        secret_cipher: SecretCipher,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.principals = principals
        self.credentials = credentials
        self.sharings = sharings
        self.secret_cipher = secret_cipher
        self._today = today

    async def authorize_reveal(
        self, principal_id: str, credential_id: str, supplied_pin: str
    ) -> str:
        """Verify the PIN and access rights, then decrypt the secret.

        Checks run in a fixed order: PIN configured, PIN correct, credential
        accessible.

        Args:
            principal_id: The requesting principal.
            credential_id: The credential to reveal.
            supplied_pin: The PIN entered by the principal.

        Returns:
            The plaintext secret.

        Raises:
            PinNotSetError: If the principal has no PIN.
            PinMismatchError: If the PIN is wrong.
            CredentialNotFoundError: If the principal or credential does not
                exist, or the principal neither owns the credential nor holds
                an active sharing grant for it.
            CryptoError: If the stored ciphertext cannot be decrypted.
        """
        principal = await self.principals.get_by_id(principal_id)
        if principal is None:
            logger.warning("Reveal refused: principal not found", principal_id=principal_id)
            raise CredentialNotFoundError("Credential not found")

        if principal.pin_hash is None:
            logger.info("Reveal refused: PIN not set", principal_id=principal_id)
            raise PinNotSetError("Security PIN not set")

        if not verify_pin(supplied_pin, principal.pin_hash):
            logger.info(
                "Reveal refused: invalid PIN",
                principal_id=principal_id,
                credential_id=credential_id,
            )
            raise PinMismatchError("Invalid PIN")

        credential = await self.credentials.get_by_id(credential_id)
        if credential is None:
            logger.info("Reveal refused: credential not found", credential_id=credential_id)
            raise CredentialNotFoundError("Credential not found")

        if credential.owner_id != principal_id:
            grant = await self.sharings.find_active_grant(
                credential_id, principal_id, self._today()
            )
            if grant is None:
                logger.info(
                    "Reveal refused: no access",
                    principal_id=principal_id,
                    credential_id=credential_id,
                )
                raise CredentialNotFoundError("Credential not found")

        plaintext = self.secret_cipher.decrypt(credential.encrypted_password)
        logger.info(
            "Credential revealed",
            principal_id=principal_id,
            credential_id=credential_id,
        )
        return plaintext

    async def set_pin(self, principal_id: str, new_pin: str) -> None:
        """Set or replace a principal's security PIN.

        Raises:
            InvalidPinFormatError: If the PIN is not 4 to 6 ASCII digits.
            CredentialNotFoundError: If the principal does not exist.
        """
        if not isinstance(new_pin, str) or not PIN_PATTERN.fullmatch(new_pin):
            raise InvalidPinFormatError("PIN must be 4 to 6 digits")

        updated = await self.principals.update_pin_hash(principal_id, hash_pin(new_pin))
        if not updated:
            raise CredentialNotFoundError("Principal not found")
        logger.info("Security PIN set", principal_id=principal_id)
