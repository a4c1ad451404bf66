"""API routes for chatting with the study assistant."""

import logging

from fastapi import APIRouter, Query

from studycompanion.api.deps import AI, AppSettings, CurrentUser, Store
from studycompanion.db.models import ChatMessage, ChatRole
from studycompanion.schemas.chat import ChatMessageRead, ChatMessageRequest, ChatReplyResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/messages", response_model=list[ChatMessageRead])
async def list_messages(
    current_user: CurrentUser,
    store: Store,
    settings: AppSettings,
    limit: int | None = Query(None, ge=1, le=500),
) -> list[ChatMessageRead]:
    """The most recent chat messages, oldest first (default 50)."""
    messages = await store.list_chat_messages(current_user.id, limit or settings.chat_log_limit)
    return [ChatMessageRead.model_validate(m) for m in messages]


@router.post("", response_model=ChatReplyResponse)
async def send_message(
    request: ChatMessageRequest,
    current_user: CurrentUser,
    store: Store,
    ai: AI,
    settings: AppSettings,
) -> ChatReplyResponse:
    """
    Send a message and get the assistant's reply.

    Flow:
    1. Load the recent conversation (before this message)
    2. Save the user message
    3. Ask the assistant and save its reply
    """
    recent = await store.list_chat_messages(current_user.id, settings.chat_history_window)
    history = [{"role": m.role, "content": m.content} for m in recent]

    await store.add(
        ChatMessage(user_id=current_user.id, role=ChatRole.USER.value, content=request.message)
    )

    reply = await ai.chat(request.message, history)

    saved = await store.add(
        ChatMessage(user_id=current_user.id, role=ChatRole.ASSISTANT.value, content=reply.content)
    )
    logger.info("Chat reply saved (%d chars, %d suggestions)", len(reply.content), len(reply.suggestions))
    return ChatReplyResponse(
        message=ChatMessageRead.model_validate(saved),
        suggestions=reply.suggestions,
    )
