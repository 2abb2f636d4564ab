"""SQLite database operations.

Handles database connection, session management, and reading session storage.
"""

import os
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..dates import to_iso
from .models import Base, ReadingSessionRecord

DEFAULT_DB_PATH = Path.home() / ".readingtracker" / "reading.db"


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     READINGTRACKER_DB_PATH env var or default location.
                     ":memory:" gives a private in-memory database.
        """
        if db_path is None:
            db_path = os.environ.get("READINGTRACKER_DB_PATH", str(DEFAULT_DB_PATH))

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        # In-memory databases must share one connection across sessions
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def create_tables(self) -> None:
        """Create all database tables."""
        # Import streak models to register them with Base
        from ..streaks.models import ReadingStreak  # noqa: F401

        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager.

        Commits on normal exit and rolls back if the block raises.
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Reading Session Operations
    # ========================================================================

    def add_reading_session(
        self, record: ReadingSessionRecord, session: Optional[Session] = None
    ) -> ReadingSessionRecord:
        """Insert a reading session record."""

        def _add(s: Session) -> ReadingSessionRecord:
            s.add(record)
            s.flush()
            return record

        if session:
            return _add(session)
        else:
            with self.get_session() as s:
                created = _add(s)
                s.expunge(created)
                return created

    def get_reading_session(
        self, session_id: str, session: Optional[Session] = None
    ) -> Optional[ReadingSessionRecord]:
        """Get a reading session by ID."""

        def _get(s: Session) -> Optional[ReadingSessionRecord]:
            return s.get(ReadingSessionRecord, session_id)

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                record = _get(s)
                if record:
                    s.expunge(record)
                return record

    def get_reading_sessions(
        self,
        user_id: str,
        limit: int = 10,
        offset: int = 0,
        session: Optional[Session] = None,
    ) -> list[ReadingSessionRecord]:
        """Get a user's reading sessions, most recently started first."""

        def _get(s: Session) -> list[ReadingSessionRecord]:
            stmt = (
                select(ReadingSessionRecord)
                .where(ReadingSessionRecord.user_id == user_id)
                .order_by(ReadingSessionRecord.started_at_iso.desc())
                .offset(offset)
                .limit(limit)
            )
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                records = _get(s)
                for record in records:
                    s.expunge(record)
                return records

    def get_reading_sessions_overlapping(
        self,
        user_id: str,
        window_start: datetime,
        window_end: datetime,
        session: Optional[Session] = None,
    ) -> list[ReadingSessionRecord]:
        """Get sessions whose effective span touches [window_start, window_end).

        Args:
            user_id: Owner of the sessions
            window_start: Inclusive window start
            window_end: Exclusive window end
        """

        def _get(s: Session) -> list[ReadingSessionRecord]:
            stmt = (
                select(ReadingSessionRecord)
                .where(
                    ReadingSessionRecord.user_id == user_id,
                    ReadingSessionRecord.started_at_iso < to_iso(window_end),
                    ReadingSessionRecord.effective_end_iso >= to_iso(window_start),
                )
                .order_by(ReadingSessionRecord.started_at_iso)
            )
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                records = _get(s)
                for record in records:
                    s.expunge(record)
                return records

    def get_reading_totals(self, user_id: str, session: Optional[Session] = None) -> dict:
        """Get summed pages, minutes and session count for a user."""

        def _get(s: Session) -> dict:
            row = s.execute(
                select(
                    func.coalesce(func.sum(ReadingSessionRecord.pages_read), 0),
                    func.coalesce(func.sum(ReadingSessionRecord.duration_minutes), 0),
                    func.count(ReadingSessionRecord.id),
                ).where(ReadingSessionRecord.user_id == user_id)
            ).one()
            return {
                "total_pages_read": int(row[0]),
                "total_minutes_read": int(row[1]),
                "session_count": int(row[2]),
            }

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                return _get(s)


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        if db_path is None:
            from ..config import get_config

            db_path = str(get_config().db_path)
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
