"""Reading session creation.

Validates a new session's dates, stores it, and folds it into the user's
streak inside a single transaction. A rejected session leaves no trace.
"""

from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from ..config import Config, get_config
from ..dates import as_utc, effective_end, to_iso, utc_day
from ..db.models import ReadingSessionRecord
from ..db.schemas import ReadingSessionCreate
from ..db.sqlite import Database, get_db
from ..errors import DateRejection, SessionDateError
from ..streaks.manager import StreakManager
from ..streaks.models import ReadingStreak


class SessionManager:
    """Creates and lists reading sessions."""

    def __init__(
        self,
        db: Optional[Database] = None,
        config: Optional[Config] = None,
        streaks: Optional[StreakManager] = None,
    ):
        """Initialize session manager.

        Args:
            db: Database instance
            config: Configuration (for the backdate limit)
            streaks: Streak manager sharing the same database
        """
        self.db = db or get_db()
        self.config = config or get_config()
        self.streaks = streaks or StreakManager(self.db)

    def validate_dates(
        self,
        started_at: datetime,
        ended_at: Optional[datetime],
        now: datetime,
    ) -> None:
        """Check ordering and the backdate limit.

        The future-date check belongs to the streak tracker and runs there.

        Raises:
            SessionDateError: INVERTED_RANGE or TOO_FAR_IN_PAST
        """
        if ended_at is not None and as_utc(ended_at) < as_utc(started_at):
            raise SessionDateError(DateRejection.INVERTED_RANGE)

        oldest_allowed = utc_day(now).toordinal() - self.config.max_backdate_days
        end = ended_at if ended_at is not None else started_at
        for instant in (started_at, end):
            if utc_day(instant).toordinal() < oldest_allowed:
                raise SessionDateError(
                    DateRejection.TOO_FAR_IN_PAST,
                    f"Session date cannot be more than {self.config.max_backdate_days} days in the past",
                )

    def log_session(
        self,
        payload: ReadingSessionCreate,
        now: Optional[datetime] = None,
    ) -> tuple[ReadingSessionRecord, ReadingStreak]:
        """Store a reading session and update the owner's streak.

        Args:
            payload: Validated session input
            now: Reference instant (default: current time)

        Returns:
            Tuple of (stored session, updated streak)

        Raises:
            SessionDateError: If the session's dates are rejected
        """
        if now is None:
            now = datetime.now(timezone.utc)

        started_at = as_utc(payload.started_at) if payload.started_at else as_utc(now)
        ended_at = as_utc(payload.ended_at) if payload.ended_at else None

        try:
            self.validate_dates(started_at, ended_at, now)
        except SessionDateError as e:
            logger.warning(f"Rejected session for user {payload.user_id}: {e.reason.value}")
            raise

        with self.db.get_session() as s:
            record = ReadingSessionRecord(
                user_id=payload.user_id,
                book_id=payload.book_id,
                session_type=payload.session_type.value,
                duration_minutes=payload.duration_minutes,
                pages_read=payload.pages_read,
                started_at_iso=to_iso(started_at),
                ended_at_iso=to_iso(ended_at) if ended_at else None,
                effective_end_iso=to_iso(
                    effective_end(started_at, ended_at, payload.duration_minutes)
                ),
            )
            self.db.add_reading_session(record, session=s)
            streak = self.streaks.apply_session(
                payload.user_id, started_at, ended_at, now=now, session=s
            )
            s.expunge(record)
            s.expunge(streak)

        logger.info(
            f"Logged session {record.id} for user {payload.user_id}: "
            f"{payload.duration_minutes} min, {payload.pages_read} pages"
        )
        return record, streak

    def list_sessions(
        self, user_id: str, limit: int = 10, offset: int = 0
    ) -> list[ReadingSessionRecord]:
        """List a user's sessions, most recent first."""
        if limit < 1 or limit > 100:
            raise ValueError(f"Limit must be between 1 and 100, got {limit}")
        if offset < 0:
            raise ValueError(f"Offset cannot be negative, got {offset}")
        return self.db.get_reading_sessions(user_id, limit=limit, offset=offset)


# Global session manager instance
_session_manager: Optional[SessionManager] = None


def get_session_manager(db: Optional[Database] = None) -> SessionManager:
    """Get or create the global session manager instance."""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager(db)
    return _session_manager


def reset_session_manager() -> None:
    """Reset the global session manager. Used for testing."""
    global _session_manager
    _session_manager = None
