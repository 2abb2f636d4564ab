"""Pydantic schemas for reading analytics."""

from pydantic import BaseModel, Field


class MonthlyDay(BaseModel):
    """Reading attributed to one UTC day of a month."""

    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    pages_read: int = Field(0, ge=0)
    minutes_read: int = Field(0, ge=0)
    session_count: int = Field(0, ge=0)


class MonthlyReport(BaseModel):
    """Per-day reading breakdown for a calendar month."""

    year: int
    month: int = Field(..., ge=1, le=12)
    total_pages_read: int = Field(0, ge=0)
    total_minutes_read: int = Field(0, ge=0)
    session_count: int = Field(0, ge=0)
    days: list[MonthlyDay] = Field(default_factory=list)


class AnalyticsSummary(BaseModel):
    """All-time reading totals for a user."""

    total_pages_read: int = Field(0, ge=0)
    total_minutes_read: int = Field(0, ge=0)
    session_count: int = Field(0, ge=0)
