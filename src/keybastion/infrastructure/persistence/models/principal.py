"""SQLAlchemy model for the principals table.

A principal is a user identity. Usernames and emails are unique.
"""

from datetime import datetime

from sqlalchemy import DateTime, Enum, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from keybastion.domain.entities.role import Role
from keybastion.infrastructure.persistence.database import Base


class PrincipalModel(Base):
    """SQLAlchemy model for the principals table.

    Attributes:
        id: Primary key (UUID string).
        username: Unique login name.
        email: Unique email address.
        password_hash: Argon2id hash of the login password.
        pin_hash: Argon2id hash of the security PIN, None until set.
        role: USER or ADMIN.
        created_at: Timestamp when the principal was created.
    """

    __tablename__ = "principals"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Principal ID (UUID)",
    )
    username: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="Login name",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Email address",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hashed login password (argon2)",
    )
    pin_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Hashed security PIN (argon2)",
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="principal_role", native_enum=False),
        nullable=False,
        default=Role.USER,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    credentials = relationship(
        "CredentialModel",
        back_populates="owner",
        cascade="all, delete-orphan",
    )

    @property
    def has_pin(self) -> bool:
        return self.pin_hash is not None

    def __repr__(self) -> str:
        return f"<Principal(id={self.id}, username={self.username}, role={self.role})>"
