"""Study plan schemas."""

import datetime as dt
from datetime import date, datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from studycompanion.schemas.base import BaseSchema

TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"  # 24h "HH:MM"


class StudyPlanEntryCreate(BaseSchema):
    """
    Schema for creating a plan entry.

    ``scheduled_date`` accepts a date or a datetime; any time-of-day part
    is dropped so entries always belong to exactly one calendar day.
    """

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    scheduled_date: date
    start_time: str = Field(..., pattern=TIME_OF_DAY_PATTERN)
    end_time: str = Field(..., pattern=TIME_OF_DAY_PATTERN)
    estimated_minutes: int = Field(..., gt=0)
    unit_id: int | None = None
    document_id: int | None = None
    completed: bool = False

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def truncate_time_of_day(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v

    @model_validator(mode="after")
    def validate_times(self) -> "StudyPlanEntryCreate":
        """Ensure the block ends after it starts."""
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class StudyPlanEntryRead(BaseSchema):
    """Schema for reading a plan entry."""

    id: int
    user_id: int
    unit_id: int | None
    document_id: int | None
    title: str
    description: str | None
    scheduled_date: date
    start_time: str
    end_time: str
    estimated_minutes: int
    completed: bool
    created_at: datetime


class DailyPlanRead(BaseSchema):
    """One day of the plan with completion figures."""

    date: dt.date
    upcoming: list[StudyPlanEntryRead]
    completed: list[StudyPlanEntryRead]
    completed_count: int
    total_count: int
    percentage: int
    planned_minutes: int
