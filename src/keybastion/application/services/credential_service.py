"""Credential write path.

Secrets are encrypted before they reach the repository; the plaintext is
dropped as soon as the ciphertext exists.
"""

from keybastion.core.logging import get_logger
from keybastion.domain.services.password_forge import GenerationOptions, PasswordForge
from keybastion.infrastructure.persistence.models import CredentialModel
from keybastion.infrastructure.persistence.repositories import CredentialRepository
from keybastion.infrastructure.security.secret_cipher import SecretCipher

logger = get_logger(__name__)


class CredentialService:
    """Creates and lists stored credentials."""

    def __init__(
        self,
        credentials: CredentialRepository,
        secret_cipher: SecretCipher,
        password_forge: PasswordForge,
    ) -> None:
        self.credentials = credentials
        self.secret_cipher = secret_cipher
        self.password_forge = password_forge

    async def create(
        self,
        owner_id: str,
        account_name: str,
        password: str,
        service_url: str,
        notes: str | None = None,
        category_id: str | None = None,
        generation: GenerationOptions | None = None,
        password_strength: int | None = None,
    ) -> CredentialModel:
        """Encrypt a secret and store it as a new credential.

        Args:
            owner_id: Principal that will own the credential.
            account_name: Display name.
            password: Plaintext secret.
            service_url: Service the credential belongs to.
            notes: Optional free text.
            category_id: Optional category reference.
            generation: Options the password was generated with, if any.
            password_strength: Score to record. Computed when omitted.

        Returns:
            The stored credential.
        """
        if password_strength is None:
            password_strength = self.password_forge.evaluate_strength(password)

        credential = CredentialModel(
            owner_id=owner_id,
            account_name=account_name,
            encrypted_password=self.secret_cipher.encrypt(password),
            service_url=service_url,
            notes=notes,
            category_id=category_id,
            password_strength=password_strength,
        )
        if generation is not None:
            credential.password_length = generation.length
            credential.include_lowercase = generation.include_lowercase
            credential.include_uppercase = generation.include_uppercase
            credential.include_numbers = generation.include_numbers
            credential.include_special = generation.include_special

        await self.credentials.create(credential)
        logger.info(
            "Credential created",
            credential_id=credential.id,
            owner_id=owner_id,
            strength=password_strength,
        )
        return credential

    async def list_for_owner(self, owner_id: str) -> list[CredentialModel]:
        """List a principal's own credentials."""
        return await self.credentials.list_by_owner(owner_id)
