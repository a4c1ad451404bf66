"""Unit schemas."""

from datetime import datetime

from pydantic import Field

from studycompanion.db.models import DEFAULT_UNIT_COLOR
from studycompanion.schemas.base import BaseSchema
from studycompanion.services.progress import UnitProgress


class UnitBase(BaseSchema):
    """Base unit schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    color: str = Field(DEFAULT_UNIT_COLOR, pattern=r"^#[0-9A-Fa-f]{6}$")


class UnitCreate(UnitBase):
    """Schema for creating a unit."""

    pass


class UnitRead(UnitBase):
    """Schema for reading unit data."""

    id: int
    user_id: int
    created_at: datetime


class UnitWithProgress(UnitRead):
    """Unit plus its derived progress figures."""

    documents_count: int
    notes_count: int
    total_topics: int
    completed_topics: int
    progress_percentage: int
    last_studied: str

    @classmethod
    def build(cls, unit: object, progress: UnitProgress) -> "UnitWithProgress":
        return cls(
            **UnitRead.model_validate(unit).model_dump(),
            documents_count=progress.documents_count,
            notes_count=progress.notes_count,
            total_topics=progress.total_topics,
            completed_topics=progress.completed_topics,
            progress_percentage=progress.progress_percentage,
            last_studied=progress.last_studied,
        )
