"""Base schema configuration."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    JSON keys are camelCase on the wire; requests may use either
    camelCase or the snake_case field names.
    """

    model_config = ConfigDict(
        from_attributes=True,  # Enable ORM mode
        str_strip_whitespace=True,
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class IDMixin(BaseModel):
    """Mixin for the integer record id."""

    id: int


class CreatedAtMixin(BaseModel):
    """Mixin for the creation timestamp."""

    created_at: datetime
