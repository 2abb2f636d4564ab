"""Pydantic schemas for reading session input and output."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class SessionType(str, Enum):
    """How a reading session was recorded."""

    TIMED = "timed"
    POMODORO = "pomodoro"
    FREE = "free"


class ReadingSessionCreate(BaseModel):
    """Schema for creating a reading session."""

    user_id: str = Field(..., min_length=1)
    book_id: Optional[str] = None
    session_type: SessionType = SessionType.FREE
    duration_minutes: int = Field(..., gt=0)
    pages_read: int = Field(0, ge=0)
    started_at: Optional[datetime] = Field(None, description="Defaults to now")
    ended_at: Optional[datetime] = Field(None, description="None for an open session")


class ReadingSessionResponse(BaseModel):
    """Schema for reading session responses."""

    id: UUID
    user_id: str
    book_id: Optional[str]
    session_type: SessionType
    duration_minutes: int
    pages_read: int
    started_at: datetime
    ended_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
