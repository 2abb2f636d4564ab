"""SQLAlchemy ORM models for local SQLite storage.

Tables:
- reading_sessions: Individual reading sessions

Instants are stored as fixed-width ISO-8601 UTC text (see dates.to_iso),
so string comparison in queries matches chronological order.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..dates import from_iso
from .schemas import SessionType


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class ReadingSessionRecord(Base):
    """Reading session model - one timed or logged stretch of reading."""

    __tablename__ = "reading_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    book_id: Mapped[Optional[str]] = mapped_column(String(36), index=True)
    session_type: Mapped[str] = mapped_column(String(20), default=SessionType.FREE.value)

    duration_minutes: Mapped[int] = mapped_column(Integer, default=0)
    pages_read: Mapped[int] = mapped_column(Integer, default=0)

    # ISO datetimes
    started_at_iso: Mapped[str] = mapped_column("started_at", String(32), nullable=False, index=True)
    ended_at_iso: Mapped[Optional[str]] = mapped_column("ended_at", String(32))
    # ended_at, or started_at + duration for open sessions
    effective_end_iso: Mapped[str] = mapped_column(
        "effective_end_at", String(32), nullable=False, index=True
    )

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso, onupdate=utc_now_iso)

    def __repr__(self) -> str:
        return (
            f"<ReadingSessionRecord(id={self.id}, user_id={self.user_id}, "
            f"started_at={self.started_at_iso})>"
        )

    @property
    def started_at(self) -> datetime:
        return from_iso(self.started_at_iso)

    @property
    def ended_at(self) -> Optional[datetime]:
        return from_iso(self.ended_at_iso)

    @property
    def effective_end(self) -> datetime:
        return from_iso(self.effective_end_iso)
