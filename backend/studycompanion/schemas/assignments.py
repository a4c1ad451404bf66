"""Assignment schemas."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import Field, field_validator, model_validator

from studycompanion.schemas.base import BaseSchema
from studycompanion.services.progress import AssignmentView

# Type aliases for enums (used as literals for API validation)
AssignmentTypeType = Literal["assignment", "cat", "exam"]
UrgencyType = Literal["high", "medium", "low"]


def _assume_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AssignmentBase(BaseSchema):
    """Base assignment schema."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    type: AssignmentTypeType = "assignment"
    questions: str | None = None
    deadline: datetime
    unit_id: int | None = None
    completed: bool = False

    @field_validator("deadline")
    @classmethod
    def deadline_is_aware(cls, v: datetime) -> datetime:
        """Naive deadlines are taken as UTC."""
        return _assume_utc(v)


class AssignmentCreate(AssignmentBase):
    """Schema for creating an assignment."""

    pass


class AssignmentRead(AssignmentBase):
    """Schema for reading assignment data."""

    id: int
    user_id: int
    created_at: datetime


class AssignmentWithUrgency(AssignmentRead):
    """Assignment annotated with values derived at read time."""

    days_until_due: int
    urgency: UrgencyType

    @classmethod
    def from_view(cls, view: AssignmentView) -> "AssignmentWithUrgency":
        return cls(
            **AssignmentRead.model_validate(view.assignment).model_dump(),
            days_until_due=view.days_until_due,
            urgency=view.urgency,
        )


class AssignmentUpdate(BaseSchema):
    """Schema for updating an assignment. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    type: AssignmentTypeType | None = None
    questions: str | None = None
    deadline: datetime | None = None
    unit_id: int | None = None
    completed: bool | None = None

    @field_validator("deadline")
    @classmethod
    def deadline_is_aware(cls, v: datetime | None) -> datetime | None:
        """Naive deadlines are taken as UTC."""
        return _assume_utc(v)

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "AssignmentUpdate":
        """Only the optional columns may be cleared with an explicit null."""
        for name in ("title", "type", "deadline", "completed"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
