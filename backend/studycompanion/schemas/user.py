"""User schemas."""

from datetime import datetime

from pydantic import Field

from studycompanion.schemas.base import BaseSchema


class UserRead(BaseSchema):
    """Schema for reading user data."""

    id: int
    username: str
    name: str
    pace: int
    created_at: datetime


class PaceUpdate(BaseSchema):
    """Study intensity dial: 1 = relaxed, 80 = intensive."""

    pace: int = Field(..., ge=1, le=80, strict=True)
