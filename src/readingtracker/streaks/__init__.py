"""Reading streak tracking."""

from .manager import StreakManager
from .models import ReadingStreak
from .schemas import StreakResponse
from .tracker import (
    StreakState,
    apply_day,
    apply_session,
    check_session_dates,
    fold_sessions,
    validate_effective_date,
)

__all__ = [
    "StreakManager",
    "ReadingStreak",
    "StreakResponse",
    "StreakState",
    "apply_day",
    "apply_session",
    "check_session_dates",
    "fold_sessions",
    "validate_effective_date",
]
