"""Document schemas."""

from studycompanion.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class DocumentRead(BaseSchema, IDMixin, CreatedAtMixin):
    """Document metadata."""

    user_id: int
    unit_id: int
    filename: str
    original_name: str
    mime_type: str
    size: int


class DocumentWithText(DocumentRead):
    """Document metadata including the extracted text."""

    extracted_text: str | None = None


class DocumentUploadResponse(DocumentWithText):
    """Result of an upload; ``extraction_warning`` is set when no text could be extracted."""

    extraction_warning: str | None = None
