"""SQLAlchemy model for per-user reading streaks.

Tables:
- reading_streaks: One streak record per user
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..dates import from_iso, to_iso
from ..db.models import Base, utc_now_iso
from .tracker import StreakState


class ReadingStreak(Base):
    """Reading streak model - current and longest run of reading days."""

    __tablename__ = "reading_streaks"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0)
    last_read_date_iso: Mapped[Optional[str]] = mapped_column("last_read_date", String(32))

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso, onupdate=utc_now_iso)

    def __repr__(self) -> str:
        return (
            f"<ReadingStreak(user_id={self.user_id}, current={self.current_streak}, "
            f"longest={self.longest_streak})>"
        )

    @property
    def last_read_date(self) -> Optional[datetime]:
        return from_iso(self.last_read_date_iso)

    def to_state(self) -> StreakState:
        """Snapshot as an immutable tracker state."""
        return StreakState(
            current_streak=self.current_streak or 0,
            longest_streak=self.longest_streak or 0,
            last_read_date=self.last_read_date,
        )

    def apply_state(self, state: StreakState) -> None:
        """Copy tracker state onto this record."""
        self.current_streak = state.current_streak
        self.longest_streak = state.longest_streak
        self.last_read_date_iso = (
            to_iso(state.last_read_date) if state.last_read_date else None
        )
