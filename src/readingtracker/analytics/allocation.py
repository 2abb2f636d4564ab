"""Day-bucket allocation of reading sessions.

Splits a session's minutes and pages across the UTC calendar days it
overlaps. Everything here is a pure function of its inputs: no I/O and no
shared state, so results can be cached by (session, window) if needed.

A "session" is any object exposing ``started_at``, ``ended_at``,
``duration_minutes`` and ``pages_read`` (the ORM record, the create schema,
or a plain dataclass in tests).
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..dates import (
    ONE_DAY,
    as_utc,
    day_key,
    day_start,
    effective_end,
    next_day_boundary,
    utc_day,
)


@dataclass(frozen=True)
class DaySegment:
    """Minutes of a session that fall on one UTC day."""

    day: date
    minutes: int

    @property
    def day_key(self) -> str:
        return day_key(self.day)


@dataclass(frozen=True)
class DayAllocation:
    """Minutes and pages attributed to one UTC day."""

    day: date
    minutes: int
    pages: int

    @property
    def day_key(self) -> str:
        return day_key(self.day)


def session_span(session) -> tuple[datetime, datetime]:
    """Effective [start, end) of a session."""
    start = as_utc(session.started_at)
    end = effective_end(start, session.ended_at, session.duration_minutes or 0)
    return start, end


def compute_day_segments(
    session,
    window_start: datetime,
    window_end: datetime,
) -> list[DaySegment]:
    """Clip a session to a window and cut it at UTC midnights.

    Args:
        session: Reading session
        window_start: Inclusive window start
        window_end: Exclusive window end

    Returns:
        Chronological segments with whole minutes of overlap per day. Days
        with less than a minute of overlap are dropped. If the clipped span
        is positive but shorter than a minute overall, a single zero-minute
        segment for the start day is returned so pages still have a home.
        An empty or inverted clipped span yields an empty list.
    """
    start, end = session_span(session)
    clip_start = max(start, as_utc(window_start))
    clip_end = min(end, as_utc(window_end))
    if clip_end <= clip_start:
        return []

    segments = []
    cursor = clip_start
    while cursor < clip_end:
        boundary = min(next_day_boundary(cursor), clip_end)
        minutes = int((boundary - cursor).total_seconds() // 60)
        if minutes > 0:
            segments.append(DaySegment(day=utc_day(cursor), minutes=minutes))
        cursor = boundary

    if not segments:
        return [DaySegment(day=utc_day(clip_start), minutes=0)]
    return segments


def _rank_by_weight(segments: Sequence[DaySegment]) -> list[int]:
    """Segment indices, heaviest first; ties keep chronological order."""
    return sorted(range(len(segments)), key=lambda idx: (-segments[idx].minutes, idx))


def _floor_shares(weights: list[int], pages: int) -> list[int]:
    total_weight = sum(weights)
    if total_weight == 0:
        return [0] * len(weights)
    return [weight * pages // total_weight for weight in weights]


def distribute_pages(
    segments: Sequence[DaySegment],
    total_pages: int,
) -> dict[str, int]:
    """Split an integer page count across segments by minute weight.

    When there are at least as many pages as segments, every segment gets one
    page up front, the rest is shared out by floored proportion, and the
    flooring leftover goes one page at a time to the segments tied for the
    largest weight (earliest first). With fewer pages than segments the
    floored shares stand and the whole leftover goes to the single heaviest
    segment. Either way the result sums exactly to ``total_pages``.

    Args:
        segments: Day segments of a single session
        total_pages: Pages to distribute

    Returns:
        Mapping of day key to pages, in segment order
    """
    if total_pages < 0:
        raise ValueError(f"Pages to distribute cannot be negative: {total_pages}")
    if not segments:
        return {}

    weights = [segment.minutes for segment in segments]
    ranked = _rank_by_weight(segments)

    if total_pages >= len(segments):
        spread = total_pages - len(segments)
        shares = _floor_shares(weights, spread)
        remainder = spread - sum(shares)

        heaviest = [idx for idx in ranked if weights[idx] == weights[ranked[0]]]
        turn = 0
        while remainder > 0:
            shares[heaviest[turn % len(heaviest)]] += 1
            turn += 1
            remainder -= 1

        pages = [1 + share for share in shares]
    else:
        pages = _floor_shares(weights, total_pages)
        pages[ranked[0]] += total_pages - sum(pages)

    return {segment.day_key: count for segment, count in zip(segments, pages)}


def _round_half_up(numerator: int, denominator: int) -> int:
    return (2 * numerator + denominator) // (2 * denominator)


def allocate_minutes_within_budget(
    segments: Sequence[DaySegment],
    available_minutes: int,
) -> list[DaySegment]:
    """Fit recorded reading minutes into a session's wall-clock segments.

    Used when the stored duration is smaller than the elapsed span. The
    first and last days are filled first (up to their actual minutes); the
    days in between share what is left in proportion to their actual
    minutes, rounded per day, with the final middle day taking the rounding
    residue.
    """
    if not segments:
        return []

    available = max(0, available_minutes)
    if available >= sum(segment.minutes for segment in segments):
        return list(segments)

    if len(segments) == 1:
        only = segments[0]
        return [DaySegment(day=only.day, minutes=min(only.minutes, available))]

    first, middle, last = segments[0], segments[1:-1], segments[-1]

    first_minutes = min(first.minutes, available)
    remaining = available - first_minutes
    last_minutes = min(last.minutes, remaining)
    remaining -= last_minutes

    allocations = [DaySegment(day=first.day, minutes=first_minutes)]

    middle_total = sum(segment.minutes for segment in middle)
    distributed = 0
    for idx, segment in enumerate(middle):
        if middle_total == 0:
            minutes = 0
        elif idx == len(middle) - 1:
            minutes = max(0, remaining - distributed)
        else:
            share = _round_half_up(segment.minutes * remaining, middle_total)
            minutes = min(share, remaining - distributed)
        distributed += minutes
        allocations.append(DaySegment(day=segment.day, minutes=minutes))

    allocations.append(DaySegment(day=last.day, minutes=last_minutes))
    return allocations


def _day_overlaps(day: date, window_start: datetime, window_end: datetime) -> bool:
    start = day_start(day)
    return start < as_utc(window_end) and start + ONE_DAY > as_utc(window_start)


def attribute_session(
    session,
    window_start: Optional[datetime] = None,
    window_end: Optional[datetime] = None,
) -> list[DayAllocation]:
    """Per-day minutes and pages for a session, optionally limited to a window.

    Pages and minutes are always split over the session's whole span first,
    so a session crossing a month boundary contributes the same share to
    each month no matter which month is queried.
    """
    start, end = session_span(session)
    segments = compute_day_segments(session, start, end)
    if not segments and end == start:
        # Zero-length session: attribute to its start day.
        segments = [DaySegment(day=utc_day(start), minutes=0)]

    pages = distribute_pages(segments, session.pages_read or 0)
    minutes = allocate_minutes_within_budget(segments, session.duration_minutes or 0)

    allocations = [
        DayAllocation(day=segment.day, minutes=segment.minutes, pages=pages[segment.day_key])
        for segment in minutes
    ]

    if window_start is not None and window_end is not None:
        allocations = [
            allocation for allocation in allocations
            if _day_overlaps(allocation.day, window_start, window_end)
        ]
    return allocations
