"""Principal repository for database operations."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from keybastion.infrastructure.persistence.models import PrincipalModel


class PrincipalRepository:
    """Repository for principal database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, principal: PrincipalModel) -> PrincipalModel:
        """Create a new principal.

        Args:
            principal: Principal model to create.

        Returns:
            Created principal model.
        """
        self.session.add(principal)
        await self.session.flush()
        return principal

    async def get_by_id(self, principal_id: str) -> PrincipalModel | None:
        """Get a principal by ID."""
        result = await self.session.execute(
            select(PrincipalModel).where(PrincipalModel.id == principal_id)
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> PrincipalModel | None:
        """Get a principal by username."""
        result = await self.session.execute(
            select(PrincipalModel).where(PrincipalModel.username == username)
        )
        return result.scalar_one_or_none()

    async def username_exists(self, username: str) -> bool:
        """Check if a username is already taken."""
        result = await self.session.execute(
            select(PrincipalModel.id).where(PrincipalModel.username == username).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def email_exists(self, email: str) -> bool:
        """Check if an email is already registered."""
        result = await self.session.execute(
            select(PrincipalModel.id).where(PrincipalModel.email == email).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def update_password_hash(self, principal_id: str, password_hash: str) -> None:
        """Replace the stored login password hash.

        Args:
            principal_id: ID of the principal to update.
            password_hash: New Argon2 hash.
        """
        await self.session.execute(
            update(PrincipalModel)
            .where(PrincipalModel.id == principal_id)
            .values(password_hash=password_hash)
        )
        await self.session.flush()

    async def update_pin_hash(self, principal_id: str, pin_hash: str) -> bool:
        """Replace the stored PIN hash.

        Returns:
            True if a principal was updated.
        """
        result = await self.session.execute(
            update(PrincipalModel)
            .where(PrincipalModel.id == principal_id)
            .values(pin_hash=pin_hash)
        )
        await self.session.flush()
        return result.rowcount > 0
