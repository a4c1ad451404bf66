"""
Summary routes.

Summaries are drafted by the AI service and stored unapproved; only the
approve endpoint flips the flag. Nothing here touches the user's notes.
"""

import logging

from fastapi import APIRouter, Query, status

from studycompanion.api.deps import AI, AppSettings, CurrentUser, Store, get_owned_or_404
from studycompanion.db.models import Document, Summary
from studycompanion.exceptions import ValidationError
from studycompanion.schemas.summaries import SummaryRead

logger = logging.getLogger(__name__)

router = APIRouter(tags=["summaries"])


@router.get("/summaries", response_model=list[SummaryRead])
async def list_summaries(
    current_user: CurrentUser,
    store: Store,
    unit_id: int | None = Query(None, alias="unitId"),
    document_id: int | None = Query(None, alias="documentId"),
    approved: bool | None = None,
) -> list[SummaryRead]:
    """
    List summaries.

    Filters:
    - unitId: summaries of one unit
    - documentId: summaries of one document
    - approved: only approved (true) or pending (false) summaries
    """
    summaries = await store.list_summaries(
        current_user.id,
        unit_id=unit_id,
        document_id=document_id,
        approved=approved,
    )
    return [SummaryRead.model_validate(s) for s in summaries]


@router.post(
    "/documents/{document_id}/summary",
    response_model=SummaryRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_summary(
    document_id: int,
    current_user: CurrentUser,
    store: Store,
    ai: AI,
    settings: AppSettings,
) -> SummaryRead:
    """Summarize a document's extracted text and save the draft for approval."""
    document = await get_owned_or_404(store, Document, document_id, current_user.id)
    if not document.extracted_text:
        raise ValidationError("No text available for summarization")

    content = await ai.summarize(
        document.extracted_text,
        context=f"Document: {document.original_name}",
        max_length=settings.summary_max_words,
    )
    summary = await store.add(
        Summary(
            user_id=current_user.id,
            document_id=document.id,
            unit_id=document.unit_id,
            content=content,
            approved=False,
        )
    )
    logger.info("Saved summary %d for document %d", summary.id, document.id)
    return SummaryRead.model_validate(summary)


@router.patch("/summaries/{summary_id}/approve", response_model=SummaryRead)
async def approve_summary(summary_id: int, current_user: CurrentUser, store: Store) -> SummaryRead:
    """Mark a summary as approved by the user."""
    summary = await get_owned_or_404(store, Summary, summary_id, current_user.id)
    summary = await store.update(Summary, summary.id, approved=True)
    return SummaryRead.model_validate(summary)


@router.delete("/summaries/{summary_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_summary(summary_id: int, current_user: CurrentUser, store: Store) -> None:
    """Delete (reject) a summary."""
    summary = await get_owned_or_404(store, Summary, summary_id, current_user.id)
    await store.delete(Summary, summary.id)
