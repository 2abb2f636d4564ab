"""UTC date normalization shared by the allocator and the streak tracker.

All bucketing happens on UTC calendar days. No timezone offset is applied
anywhere; naive datetimes are taken to already be in UTC.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Optional, Union

ONE_DAY = timedelta(days=1)


def as_utc(instant: datetime) -> datetime:
    """Return an aware UTC datetime for the given instant."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def utc_day(instant: datetime) -> date:
    """Truncate an instant to its UTC calendar day."""
    return as_utc(instant).date()


def day_start(day: date) -> datetime:
    """Midnight UTC at the start of a calendar day."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def next_day_boundary(instant: datetime) -> datetime:
    """First UTC midnight strictly after the start of the instant's day."""
    return day_start(utc_day(instant) + ONE_DAY)


def day_key(value: Union[date, datetime]) -> str:
    """Format a day (or an instant's UTC day) as YYYY-MM-DD."""
    if isinstance(value, datetime):
        value = utc_day(value)
    return value.isoformat()


def iter_days(first: date, last: date) -> Iterator[date]:
    """Yield every calendar day from first to last, inclusive."""
    cursor = first
    while cursor <= last:
        yield cursor
        cursor += ONE_DAY


def month_window(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open UTC window [start, end) covering a calendar month."""
    if year < 1970:
        raise ValueError(f"Year must be 1970 or later, got {year}")
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def effective_end(
    started_at: datetime,
    ended_at: Optional[datetime],
    duration_minutes: int,
) -> datetime:
    """End instant used for attribution.

    An open session (no ended_at) is taken to run for its recorded duration.
    """
    if ended_at is not None:
        return as_utc(ended_at)
    return as_utc(started_at) + timedelta(minutes=duration_minutes)


def to_iso(instant: datetime) -> str:
    """Fixed-width ISO-8601 text so string order matches time order."""
    return as_utc(instant).isoformat(timespec="microseconds")


def from_iso(text: Optional[str]) -> Optional[datetime]:
    """Parse text written by to_iso (or any ISO-8601 instant)."""
    if not text:
        return None
    return as_utc(datetime.fromisoformat(text))
