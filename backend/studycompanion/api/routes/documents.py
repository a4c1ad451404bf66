"""API routes for document upload and management."""

import logging

from fastapi import APIRouter, File, UploadFile, status

from studycompanion.api.deps import Blobs, CurrentUser, Processor, Store, get_owned_or_404
from studycompanion.db.models import Document, Unit
from studycompanion.exceptions import ExtractionError
from studycompanion.schemas.documents import DocumentRead, DocumentUploadResponse, DocumentWithText

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


# =============================================================================
# UPLOAD
# =============================================================================


@router.post(
    "/units/{unit_id}/documents",
    response_model=DocumentUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_document(
    unit_id: int,
    current_user: CurrentUser,
    store: Store,
    blobs: Blobs,
    processor: Processor,
    file: UploadFile = File(...),
) -> DocumentUploadResponse:
    """
    Upload a PDF or DOCX file into a unit.

    Flow:
    1. Validate type and size (400 on failure)
    2. Extract text; a failure here is logged and the document is kept
       with empty text
    3. Store the bytes and create the document record
    """
    unit = await get_owned_or_404(store, Unit, unit_id, current_user.id)

    if file.size is not None:
        processor.validate_upload(file.content_type, file.size)
    data = await file.read()
    original_name = file.filename or "document"
    processor.validate_upload(file.content_type, len(data))

    extraction_warning = None
    try:
        extracted = await processor.extract_text(data, file.content_type)
        extracted_text = extracted.text
        logger.info(
            "Extracted %d words from %s (%s pages)",
            extracted.word_count,
            original_name,
            extracted.page_count if extracted.page_count is not None else "n/a",
        )
    except ExtractionError as e:
        logger.warning("Text extraction failed for %s: %s", original_name, e)
        extracted_text = ""
        extraction_warning = str(e)

    filename = processor.generate_filename(original_name)
    location = await blobs.save(data, filename)

    document = await store.add(
        Document(
            user_id=current_user.id,
            unit_id=unit.id,
            filename=filename,
            original_name=original_name,
            mime_type=file.content_type,
            size=len(data),
            storage_location=location,
            extracted_text=extracted_text,
        )
    )
    return DocumentUploadResponse(
        **DocumentWithText.model_validate(document).model_dump(),
        extraction_warning=extraction_warning,
    )


# =============================================================================
# DOCUMENT MANAGEMENT
# =============================================================================


@router.get("/units/{unit_id}/documents", response_model=list[DocumentRead])
async def list_documents(unit_id: int, current_user: CurrentUser, store: Store) -> list[DocumentRead]:
    """List the documents of a unit."""
    unit = await get_owned_or_404(store, Unit, unit_id, current_user.id)
    return [DocumentRead.model_validate(d) for d in await store.list_documents(unit.id)]


@router.get("/documents/{document_id}", response_model=DocumentWithText)
async def get_document(document_id: int, current_user: CurrentUser, store: Store) -> DocumentWithText:
    """Get document details including extracted text."""
    document = await get_owned_or_404(store, Document, document_id, current_user.id)
    return DocumentWithText.model_validate(document)


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: int, current_user: CurrentUser, store: Store, blobs: Blobs) -> None:
    """
    Delete a document from both blob storage and the record store.

    The file is removed first; if that fails the record is preserved so no
    stored file is orphaned. Summaries of the document go with it, notes
    and plan entries are unlinked.
    """
    document = await get_owned_or_404(store, Document, document_id, current_user.id)
    await blobs.delete(document.storage_location)
    await store.delete(Document, document.id)
