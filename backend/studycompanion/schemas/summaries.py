"""Summary schemas."""

from studycompanion.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class SummaryRead(BaseSchema, IDMixin, CreatedAtMixin):
    """AI summary and whether the user accepted it."""

    user_id: int
    document_id: int | None
    unit_id: int | None
    content: str
    approved: bool
