"""Pydantic schemas for chat operations."""

from typing import Literal

from pydantic import Field

from studycompanion.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class ChatMessageRequest(BaseSchema):
    """Request to send a chat message."""

    message: str = Field(..., min_length=1, max_length=10000)


class ChatMessageRead(BaseSchema, IDMixin, CreatedAtMixin):
    """One entry of the chat log."""

    user_id: int
    role: Literal["user", "assistant"]
    content: str


class ChatReplyResponse(BaseSchema):
    """Assistant reply plus follow-up actions suggested by its wording."""

    message: ChatMessageRead
    suggestions: list[str]
