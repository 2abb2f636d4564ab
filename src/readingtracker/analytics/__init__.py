"""Reading analytics: day-bucket allocation and monthly reports."""

from .allocation import (
    DayAllocation,
    DaySegment,
    allocate_minutes_within_budget,
    attribute_session,
    compute_day_segments,
    distribute_pages,
)
from .monthly import MonthlyReportBuilder, ReadingAnalytics
from .schemas import AnalyticsSummary, MonthlyDay, MonthlyReport

__all__ = [
    "DayAllocation",
    "DaySegment",
    "allocate_minutes_within_budget",
    "attribute_session",
    "compute_day_segments",
    "distribute_pages",
    "MonthlyReportBuilder",
    "ReadingAnalytics",
    "AnalyticsSummary",
    "MonthlyDay",
    "MonthlyReport",
]
