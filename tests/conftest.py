"""Pytest configuration and shared fixtures.

Provides in-memory databases, a fixed reference clock and lightweight
session values for exercising the allocator without storage.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, Optional

import pytest

from readingtracker.config import Config, reset_config
from readingtracker.db.sqlite import Database, reset_db


@dataclass(frozen=True)
class SessionValue:
    """Minimal stand-in for a stored reading session."""

    started_at: datetime
    ended_at: Optional[datetime]
    duration_minutes: int
    pages_read: int


def utc(*args: int) -> datetime:
    """Build an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


# ============================================================================
# Clock and Session Fixtures
# ============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant for date validation."""
    return utc(2023, 11, 15, 12, 0)


@pytest.fixture
def make_session():
    """Factory for session values."""

    def _make(
        started_at: datetime,
        ended_at: Optional[datetime] = None,
        duration_minutes: int = 0,
        pages_read: int = 0,
    ) -> SessionValue:
        return SessionValue(
            started_at=started_at,
            ended_at=ended_at,
            duration_minutes=duration_minutes,
            pages_read=pages_read,
        )

    return _make


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def db() -> Generator[Database, None, None]:
    """Create an in-memory database for testing."""
    reset_db()
    reset_config()

    database = Database(":memory:")
    database.create_tables()
    yield database

    reset_db()


@pytest.fixture
def config() -> Config:
    """Configuration with the default 30-day backdate limit."""
    return Config(
        db_path=Path(":memory:"),
        max_backdate_days=30,
        log_level="INFO",
        log_file=None,
    )
