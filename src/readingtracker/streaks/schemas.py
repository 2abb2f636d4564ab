"""Pydantic schemas for reading streaks."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class StreakResponse(BaseModel):
    """Schema for streak response."""

    user_id: str
    current_streak: int
    longest_streak: int
    last_read_date: Optional[datetime]
    updated_at: datetime

    model_config = {"from_attributes": True}
