from datetime import date, datetime, timezone
import uuid

from sqlalchemy import String, Date, DateTime, UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from user_service.database.base import Base

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 200


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    SQLAlchemy model for User.

    Timestamps are set on the Python side as well as the server side so they are
    loaded after a flush without an extra (async) refresh.
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False
    )

    # Unique; the service pre-checks, the constraint catches races
    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH),
        unique=True,
        index=True,
        nullable=False
    )

    date_of_birth: Mapped[date | None] = mapped_column(
        Date,
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, name={self.name!r}, email={self.email!r})>"
