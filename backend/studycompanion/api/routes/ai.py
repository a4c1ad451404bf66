"""Routes for on-demand AI features: quizzes and content search."""

from fastapi import APIRouter

from studycompanion.api.deps import AI, CurrentUser, Store, get_owned_or_404
from studycompanion.db.models import Unit
from studycompanion.schemas.ai import (
    QuizRequest,
    QuizResult,
    RelevantContentRequest,
    RelevantContentResult,
)
from studycompanion.services.ai_service import SearchableDocument

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/quiz", response_model=QuizResult)
async def generate_quiz(request: QuizRequest, current_user: CurrentUser, ai: AI) -> QuizResult:
    """Generate a practice quiz on a topic."""
    return await ai.generate_quiz(request.topic, request.difficulty, request.count)


@router.post("/relevant-content", response_model=RelevantContentResult)
async def find_relevant_content(
    request: RelevantContentRequest,
    current_user: CurrentUser,
    store: Store,
    ai: AI,
) -> RelevantContentResult:
    """
    Rank the user's documents against a query.

    Only documents with extracted text take part; pass unitId to search a
    single unit.
    """
    if request.unit_id is not None:
        unit = await get_owned_or_404(store, Unit, request.unit_id, current_user.id)
        documents = await store.list_documents(unit.id)
    else:
        documents = await store.list_user_documents(current_user.id)

    searchable = [
        SearchableDocument(id=d.id, title=d.original_name, content=d.extracted_text)
        for d in documents
        if d.extracted_text
    ]
    ranked = await ai.find_relevant_content(request.query, searchable)
    return RelevantContentResult(documents=ranked)
