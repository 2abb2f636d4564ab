"""Monthly reading reports.

Sessions are attributed to UTC days with the allocator, clipped to the
month, and merged by simple addition. A session crossing a month boundary
shows up in both months with its share of minutes and pages.
"""

from collections import defaultdict
from typing import Iterable, Optional

from loguru import logger

from ..dates import month_window
from ..db.sqlite import Database, get_db
from .allocation import attribute_session
from .schemas import AnalyticsSummary, MonthlyDay, MonthlyReport


class MonthlyReportBuilder:
    """Builds a monthly report from already-loaded sessions."""

    def build(self, sessions: Iterable, year: int, month: int) -> MonthlyReport:
        """Attribute sessions to the days of a month.

        Args:
            sessions: Sessions overlapping the month (others contribute nothing)
            year: Calendar year
            month: Month (1-12)

        Returns:
            MonthlyReport with days in chronological order
        """
        window_start, window_end = month_window(year, month)

        buckets: dict[str, dict[str, int]] = defaultdict(
            lambda: {"pages_read": 0, "minutes_read": 0, "session_count": 0}
        )
        contributing = 0

        for session in sessions:
            allocations = attribute_session(session, window_start, window_end)
            if not allocations:
                continue
            contributing += 1
            for allocation in allocations:
                bucket = buckets[allocation.day_key]
                bucket["pages_read"] += allocation.pages
                bucket["minutes_read"] += allocation.minutes
                bucket["session_count"] += 1

        days = [MonthlyDay(date=key, **buckets[key]) for key in sorted(buckets)]

        return MonthlyReport(
            year=year,
            month=month,
            total_pages_read=sum(day.pages_read for day in days),
            total_minutes_read=sum(day.minutes_read for day in days),
            session_count=contributing,
            days=days,
        )


class ReadingAnalytics:
    """Reads stored sessions and builds reports."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize analytics.

        Args:
            db: Database instance
        """
        self.db = db or get_db()
        self.builder = MonthlyReportBuilder()

    def monthly_report(self, user_id: str, year: int, month: int) -> MonthlyReport:
        """Get the per-day breakdown of a user's reading for a month."""
        window_start, window_end = month_window(year, month)
        sessions = self.db.get_reading_sessions_overlapping(user_id, window_start, window_end)
        logger.debug(f"Monthly report {year}-{month:02d} for user {user_id}: {len(sessions)} sessions")
        return self.builder.build(sessions, year, month)

    def summary(self, user_id: str) -> AnalyticsSummary:
        """Get all-time totals for a user."""
        return AnalyticsSummary(**self.db.get_reading_totals(user_id))
