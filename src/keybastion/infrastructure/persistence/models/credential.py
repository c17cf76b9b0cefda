"""SQLAlchemy model for the credentials table.

Only the ciphertext of a secret is stored. Generation metadata records how
a generated password was produced and how strong it scored.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from keybastion.infrastructure.persistence.database import Base


class CredentialModel(Base):
    """SQLAlchemy model for the credentials table.

    Attributes:
        id: Primary key (UUID string).
        owner_id: Principal that owns the credential.
        account_name: Display name.
        encrypted_password: Ciphertext of the secret.
        service_url: Service the credential belongs to.
        notes: Optional free text.
        category_id: Optional category reference.
        password_length .. include_special: Generation flags, if generated.
        password_strength: Strength score when the secret was saved.
        created_at: Timestamp when the credential was created.
    """

    __tablename__ = "credentials"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("principals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    account_name: Mapped[str] = mapped_column(String(255), nullable=False)
    encrypted_password: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Ciphertext of the secret",
    )
    service_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[str | None] = mapped_column(
        String(36),
        nullable=True,
        comment="Opaque category reference",
    )

    password_length: Mapped[int | None] = mapped_column(Integer, nullable=True)
    include_lowercase: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    include_uppercase: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    include_numbers: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    include_special: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    password_strength: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    owner = relationship("PrincipalModel", back_populates="credentials")

    def __repr__(self) -> str:
        # Never include the ciphertext
        return f"<Credential(id={self.id}, owner_id={self.owner_id}, account_name={self.account_name})>"
