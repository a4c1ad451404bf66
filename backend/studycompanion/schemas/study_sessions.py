"""Study session schemas."""

import datetime as dt

from pydantic import Field

from studycompanion.schemas.base import BaseSchema


class StudySessionCreate(BaseSchema):
    """
    Time studied on one day.

    Posting twice for the same date adds to that day's totals.
    """

    date: dt.date
    minutes_studied: int = Field(..., ge=0)
    topics_completed: int = Field(..., ge=0)


class StudySessionRead(BaseSchema):
    """Schema for reading a day's study totals."""

    id: int
    user_id: int
    date: dt.date
    minutes_studied: int
    topics_completed: int
    created_at: dt.datetime


class StudySessionRecorded(StudySessionRead):
    """Upsert result with an optional nudge to take a break."""

    break_suggestion: str | None = None
