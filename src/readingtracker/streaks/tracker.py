"""Day-granularity reading streak tracking as a fold over explicit state.

Sessions are applied one at a time in arrival order, which need not be
chronological. Each session is expanded into the UTC days it covers and
every day is folded into the state:

- first day ever: streak starts at 1
- same day as the last read day: no change
- the day after the last read day: streak grows by 1
- any later day: streak restarts at 1
- a day before the last read day (backfill): ignored

Because the fold depends on arrival order, inserting backfilled sessions
that straddle a gap can give a different longest streak than inserting the
same sessions chronologically.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..dates import as_utc, iter_days, utc_day
from ..errors import DateRejection, SessionDateError


@dataclass(frozen=True)
class StreakState:
    """Streak counters for one user."""

    current_streak: int = 0
    longest_streak: int = 0
    last_read_date: Optional[datetime] = None
    last_read_day: Optional[date] = None

    def __post_init__(self) -> None:
        if self.last_read_date is not None:
            object.__setattr__(self, "last_read_date", as_utc(self.last_read_date))
        if self.last_read_day is None and self.last_read_date is not None:
            object.__setattr__(self, "last_read_day", utc_day(self.last_read_date))


def validate_effective_date(instant: datetime, now: datetime) -> Optional[DateRejection]:
    """Return a rejection if the instant falls on a UTC day after now's."""
    if utc_day(instant) > utc_day(now):
        return DateRejection.FUTURE_DATE
    return None


def check_session_dates(
    started_at: datetime,
    ended_at: Optional[datetime],
    now: datetime,
) -> None:
    """Raise SessionDateError on the first bad date of a session."""
    started_at = as_utc(started_at)
    end = as_utc(ended_at) if ended_at is not None else started_at
    for instant in (started_at, end):
        reason = validate_effective_date(instant, now)
        if reason is not None:
            raise SessionDateError(reason)
    if end < started_at:
        raise SessionDateError(DateRejection.INVERTED_RANGE)


def apply_day(state: StreakState, day: date) -> StreakState:
    """Fold one reading day into the streak state."""
    if state.last_read_day is None:
        return replace(
            state,
            current_streak=1,
            longest_streak=max(state.longest_streak, 1),
            last_read_day=day,
        )

    gap = (day - state.last_read_day).days
    if gap <= 0:
        return state

    if gap == 1:
        current = state.current_streak + 1
        return replace(
            state,
            current_streak=current,
            longest_streak=max(state.longest_streak, current),
            last_read_day=day,
        )

    return replace(
        state,
        current_streak=1,
        longest_streak=max(state.longest_streak, 1),
        last_read_day=day,
    )


def apply_session(
    state: StreakState,
    started_at: datetime,
    ended_at: Optional[datetime],
    now: datetime,
) -> StreakState:
    """Apply one reading session to a streak state.

    Args:
        state: State before this session
        started_at: Session start
        ended_at: Session end, or None to use the start
        now: Reference instant for the future-date check

    Returns:
        New state; the input state is never modified

    Raises:
        SessionDateError: If either date is on a future day or the range is inverted
    """
    check_session_dates(started_at, ended_at, now)
    started_at = as_utc(started_at)
    end = as_utc(ended_at) if ended_at is not None else started_at

    folded = state
    for day in iter_days(utc_day(started_at), utc_day(end)):
        folded = apply_day(folded, day)

    end_day = utc_day(end)
    if folded.last_read_day is not None and end_day < folded.last_read_day:
        return folded

    last_read_date = end
    if folded.last_read_date is not None and folded.last_read_date > end:
        # Same-day session that finished earlier than the one on record
        last_read_date = folded.last_read_date

    return replace(folded, last_read_date=last_read_date, last_read_day=end_day)


def fold_sessions(
    sessions: Iterable[tuple[datetime, Optional[datetime]]],
    now: datetime,
    state: Optional[StreakState] = None,
) -> StreakState:
    """Apply (started_at, ended_at) pairs in the order given."""
    folded = state or StreakState()
    for started_at, ended_at in sessions:
        folded = apply_session(folded, started_at, ended_at, now)
    return folded
