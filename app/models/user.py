"""User model for registered survey authors and respondents."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, DateTime, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.database import Base, new_uuid


class User(Base):
    """Registered account.

    Attributes:
        id: Primary key (UUID string)
        username: Unique login name
        email: Unique email address
        password: Password hash (never the plaintext)
        name: Optional display name
        created_at: Registration timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Unique login name"
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Unique email address"
    )
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Password hash"
    )
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    surveys: Mapped[list["Survey"]] = relationship(
        "Survey",
        back_populates="owner",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
