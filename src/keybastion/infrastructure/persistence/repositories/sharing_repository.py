"""Sharing repository for database operations."""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keybastion.infrastructure.persistence.models import SharingModel


class SharingRepository:
    """Repository for sharing grant database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, sharing: SharingModel) -> SharingModel:
        """Store a new sharing grant."""
        self.session.add(sharing)
        await self.session.flush()
        return sharing

    async def find_active_grant(
        self, credential_id: str, shared_with_id: str, today: date
    ) -> SharingModel | None:
        """Find an accepted, unexpired grant of a credential to a principal.

        Args:
            credential_id: The shared credential.
            shared_with_id: The receiving principal.
            today: Current date; grants expiring on or before it are inert.

        Returns:
            The first matching grant, or None.
        """
        result = await self.session.execute(
            select(SharingModel)
            .where(
                SharingModel.credential_id == credential_id,
                SharingModel.shared_with_id == shared_with_id,
                SharingModel.accepted.is_(True),
                SharingModel.expiration_date > today,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()
