"""Tests for upload validation and text extraction."""

import io
from unittest.mock import AsyncMock

import pytest
from starlette.datastructures import Headers, UploadFile

from studycompanion.api.routes.documents import upload_document
from studycompanion.db.models import Unit
from studycompanion.exceptions import ExtractionError, ValidationError
from studycompanion.services.documents import DOCX_MIME_TYPE, PDF_MIME_TYPE, DocumentProcessor
from tests.factories import make_docx, make_docx_from_body, make_pdf


@pytest.fixture
def processor() -> DocumentProcessor:
    return DocumentProcessor(max_size_bytes=1024)


async def test_pdf_text_and_page_count(processor):
    extracted = await processor.extract_text(make_pdf("Mitral valve"), PDF_MIME_TYPE)

    assert "Mitral valve" in extracted.text
    assert extracted.page_count == 1
    assert extracted.word_count == 2


async def test_docx_paragraphs(processor):
    extracted = await processor.extract_text(make_docx("Innate immunity", "Adaptive immunity"), DOCX_MIME_TYPE)

    assert extracted.text == "Innate immunity\n\nAdaptive immunity"
    assert extracted.page_count is None
    assert extracted.word_count == 4


async def test_docx_tabs_and_line_breaks_separate_words(processor):
    body = (
        "<w:p><w:r><w:t>Cell</w:t><w:tab/><w:t>membrane</w:t>"
        "<w:br/><w:t>Nucleus</w:t></w:r></w:p>"
    )

    extracted = await processor.extract_text(make_docx_from_body(body), DOCX_MIME_TYPE)

    assert extracted.text.split() == ["Cell", "membrane", "Nucleus"]
    assert extracted.word_count == 3


async def test_unreadable_docx(processor):
    with pytest.raises(ExtractionError):
        await processor.extract_text(b"not a zip archive", DOCX_MIME_TYPE)


async def test_unsupported_type(processor):
    with pytest.raises(ExtractionError):
        await processor.extract_text(b"hello", "text/plain")


def test_validate_upload(processor):
    processor.validate_upload(PDF_MIME_TYPE, 1024)
    with pytest.raises(ValidationError, match="too large"):
        processor.validate_upload(PDF_MIME_TYPE, 1025)
    with pytest.raises(ValidationError, match="empty"):
        processor.validate_upload(DOCX_MIME_TYPE, 0)
    with pytest.raises(ValidationError, match="Only PDF and DOCX"):
        processor.validate_upload("image/png", 10)


def test_generated_filenames_keep_extension():
    first = DocumentProcessor.generate_filename("Heart Notes.PDF")
    second = DocumentProcessor.generate_filename("Heart Notes.PDF")

    assert first.endswith(".pdf")
    assert first != second


async def test_declared_size_is_checked_before_reading(store, user, processor):
    unit = await store.add(Unit(user_id=user.id, name="Anatomy"))
    file = UploadFile(
        io.BytesIO(b"%PDF"),
        size=50 * 1024 * 1024,
        filename="huge.pdf",
        headers=Headers({"content-type": PDF_MIME_TYPE}),
    )
    file.read = AsyncMock(side_effect=AssertionError("body should not be read"))

    with pytest.raises(ValidationError, match="too large"):
        await upload_document(unit.id, user, store, None, processor, file)

    file.read.assert_not_awaited()
