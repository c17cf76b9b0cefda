"""SQLAlchemy model for the sharings table.

A sharing is a directed grant of one credential from its owner to another
principal. It grants access only once accepted and before its expiration
date.
"""

import uuid
from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from keybastion.infrastructure.persistence.database import Base


class SharingModel(Base):
    """SQLAlchemy model for the sharings table.

    Attributes:
        id: Primary key (UUID string).
        credential_id: The shared credential.
        shared_by_id: Owner who granted access.
        shared_with_id: Principal receiving access.
        expiration_date: Last day before the grant becomes inert.
        access_token: Unique token identifying the grant.
        accepted: Whether the recipient accepted the grant.
    """

    __tablename__ = "sharings"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    credential_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("credentials.id", ondelete="CASCADE"),
        nullable=False,
    )
    shared_by_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("principals.id", ondelete="CASCADE"),
        nullable=False,
    )
    shared_with_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("principals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expiration_date: Mapped[date] = mapped_column(Date, nullable=False)
    access_token: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        default=lambda: str(uuid.uuid4()),
    )
    accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_sharings_credential_recipient", "credential_id", "shared_with_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Sharing(id={self.id}, credential_id={self.credential_id}, "
            f"shared_with_id={self.shared_with_id}, accepted={self.accepted})>"
        )
