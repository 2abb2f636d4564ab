"""Database module for local SQLite storage."""

from .models import Base, ReadingSessionRecord
from .schemas import ReadingSessionCreate, ReadingSessionResponse, SessionType
from .sqlite import Database, get_db

__all__ = [
    "Base",
    "ReadingSessionRecord",
    "ReadingSessionCreate",
    "ReadingSessionResponse",
    "SessionType",
    "Database",
    "get_db",
]
