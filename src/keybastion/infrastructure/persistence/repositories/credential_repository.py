"""Credential repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keybastion.infrastructure.persistence.models import CredentialModel


class CredentialRepository:
    """Repository for credential database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, credential: CredentialModel) -> CredentialModel:
        """Store a new credential.

        Args:
            credential: Credential model holding ciphertext only.

        Returns:
            The stored model.
        """
        self.session.add(credential)
        await self.session.flush()
        return credential

    async def get_by_id(self, credential_id: str) -> CredentialModel | None:
        """Get a credential by ID."""
        result = await self.session.execute(
            select(CredentialModel).where(CredentialModel.id == credential_id)
        )
        return result.scalar_one_or_none()

    async def list_by_owner(self, owner_id: str) -> list[CredentialModel]:
        """List the credentials a principal owns, newest first."""
        result = await self.session.execute(
            select(CredentialModel)
            .where(CredentialModel.owner_id == owner_id)
            .order_by(CredentialModel.created_at.desc())
        )
        return list(result.scalars().all())
