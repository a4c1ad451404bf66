"""Upload validation and text extraction for PDF and DOCX documents."""

import io
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import PurePath

import mammoth
import pymupdf  # PyMuPDF

from studycompanion.exceptions import ExtractionError, ValidationError

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_MIME_TYPES = (PDF_MIME_TYPE, DOCX_MIME_TYPE)

# Control characters that Postgres TEXT/VARCHAR cannot store (NUL, etc.)
_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


@dataclass(frozen=True)
class ExtractedContent:
    text: str
    page_count: int | None = None
    word_count: int = 0


class DocumentProcessor:
    """Checks uploads against the accepted types/size and pulls their text out."""

    def __init__(self, max_size_bytes: int = 10 * 1024 * 1024):
        self.max_size_bytes = max_size_bytes

    def validate_upload(self, mime_type: str | None, size: int) -> None:
        """
        Accept PDF and DOCX files up to ``max_size_bytes``.

        Raises:
            ValidationError: with the reason the file is rejected
        """
        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError("Only PDF and DOCX files are supported")
        if size <= 0:
            raise ValidationError("Uploaded file is empty")
        if size > self.max_size_bytes:
            limit_mb = self.max_size_bytes / (1024 * 1024)
            raise ValidationError(f"File is too large (maximum {limit_mb:g}MB)")

    @staticmethod
    def generate_filename(original_name: str) -> str:
        """Unique storage name that keeps the original extension: ``<epoch-ms>_<random><ext>``."""
        extension = PurePath(original_name).suffix.lower()
        return f"{int(time.time() * 1000)}_{secrets.token_hex(4)}{extension}"

    async def extract_text(self, data: bytes, mime_type: str) -> ExtractedContent:
        """
        Extract plain text from document bytes.

        Raises:
            ExtractionError: if the type is unsupported or the file cannot be read
        """
        if mime_type == PDF_MIME_TYPE:
            return self._extract_pdf(data)
        if mime_type == DOCX_MIME_TYPE:
            return self._extract_docx(data)
        raise ExtractionError(f"Unsupported file type: {mime_type}")

    @staticmethod
    def _extract_pdf(data: bytes) -> ExtractedContent:
        try:
            doc = pymupdf.open(stream=data, filetype="pdf")
            text_pages = [page.get_text() for page in doc]
            page_count = len(doc)
            doc.close()
        except Exception as e:
            raise ExtractionError(f"Text extraction failed: {e}") from e
        if page_count == 0:
            raise ExtractionError("Text extraction failed: the PDF has no pages")

        # Combine all pages with double newline separator
        text = _ILLEGAL_CHARS.sub("", "\n\n".join(text_pages)).strip()
        return ExtractedContent(text=text, page_count=page_count, word_count=len(text.split()))

    @staticmethod
    def _extract_docx(data: bytes) -> ExtractedContent:
        try:
            result = mammoth.extract_raw_text(io.BytesIO(data))
        except Exception as e:
            raise ExtractionError(f"Text extraction failed: {e}") from e

        # Paragraphs come back separated by blank lines
        text = _ILLEGAL_CHARS.sub("", result.value).strip()
        return ExtractedContent(text=text, word_count=len(text.split()))
