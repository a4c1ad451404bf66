"""Note schemas."""

from datetime import datetime

from pydantic import Field

from studycompanion.schemas.base import BaseSchema


class NoteCreate(BaseSchema):
    """Schema for creating a note inside a unit, optionally about one of its documents."""

    content: str = Field(..., min_length=1)
    document_id: int | None = None


class NoteUpdate(BaseSchema):
    """Notes are edited by replacing their content."""

    content: str = Field(..., min_length=1)


class NoteRead(BaseSchema):
    """Schema for reading note data."""

    id: int
    user_id: int
    unit_id: int
    document_id: int | None
    content: str
    created_at: datetime
    updated_at: datetime
