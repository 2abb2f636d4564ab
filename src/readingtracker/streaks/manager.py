"""Streak manager: applies reading sessions to stored streak records."""

from datetime import datetime, timezone
from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db.sqlite import Database, get_db
from ..errors import SessionDateError
from . import tracker
from .models import ReadingStreak


class StreakManager:
    """Loads, folds and saves per-user reading streaks."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize streak manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def _load(self, s: Session, user_id: str, for_update: bool = False) -> Optional[ReadingStreak]:
        stmt = select(ReadingStreak).where(ReadingStreak.user_id == user_id)
        if for_update:
            # Serializes concurrent sessions for one user; SQLite ignores it
            stmt = stmt.with_for_update()
        return s.execute(stmt).scalar_one_or_none()

    def get_streak(self, user_id: str, session: Optional[Session] = None) -> ReadingStreak:
        """Get a user's streak, creating an empty one on first access.

        Args:
            user_id: User to look up
            session: Optional caller-owned session

        Returns:
            ReadingStreak for the user
        """

        def _get(s: Session) -> ReadingStreak:
            streak = self._load(s, user_id)
            if streak is None:
                streak = ReadingStreak(
                    user_id=user_id,
                    current_streak=0,
                    longest_streak=0,
                    last_read_date_iso=None,
                )
                s.add(streak)
                s.flush()
            return streak

        if session:
            return _get(session)

        try:
            with self.db.get_session() as s:
                streak = _get(s)
                s.expunge(streak)
                return streak
        except IntegrityError:
            # Another caller created the row between our lookup and insert
            logger.debug(f"Streak for user {user_id} created concurrently, reloading")
            with self.db.get_session() as s:
                streak = self._load(s, user_id)
                s.expunge(streak)
                return streak

    def apply_session(
        self,
        user_id: str,
        started_at: datetime,
        ended_at: Optional[datetime],
        now: Optional[datetime] = None,
        session: Optional[Session] = None,
    ) -> ReadingStreak:
        """Fold one reading session into the user's streak.

        Must run inside the transaction that stores the session so both
        commit or roll back together.

        Args:
            user_id: Owner of the session
            started_at: Session start
            ended_at: Session end, or None to use the start
            now: Reference instant for the future-date check (default: now)
            session: Caller-owned session; a private one is used if omitted

        Returns:
            Updated ReadingStreak

        Raises:
            SessionDateError: If the session dates are rejected; nothing is written
        """
        if now is None:
            now = datetime.now(timezone.utc)

        try:
            tracker.check_session_dates(started_at, ended_at, now)
        except SessionDateError as e:
            logger.warning(f"Rejected streak update for user {user_id}: {e.reason.value}")
            raise

        def _apply(s: Session) -> ReadingStreak:
            streak = self._load(s, user_id, for_update=True)
            before = streak.to_state() if streak else tracker.StreakState()
            after = tracker.apply_session(before, started_at, ended_at, now)

            if streak is None:
                streak = ReadingStreak(user_id=user_id)
                s.add(streak)
            streak.apply_state(after)
            s.flush()

            logger.info(
                f"Streak for user {user_id}: current {before.current_streak} -> "
                f"{after.current_streak}, longest {after.longest_streak}"
            )
            return streak

        if session:
            return _apply(session)
        else:
            with self.db.get_session() as s:
                streak = _apply(s)
                s.expunge(streak)
                return streak
