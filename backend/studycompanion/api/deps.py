"""
FastAPI dependencies.

Key patterns:
1. Shared objects (record store, AI service, blob storage) live on
   ``app.state`` and are handed to routes through dependencies, so tests
   can build an app around their own instances
2. get_current_user: resolves the single configured user
3. User-scoped lookups: records are fetched by id and checked against the
   current user; anything else is a 404
"""

from typing import Annotated, TypeVar

from fastapi import Depends, HTTPException, Request, status

from studycompanion.config import Settings
from studycompanion.db.base import Base
from studycompanion.db.models import User
from studycompanion.services.ai_service import AIService
from studycompanion.services.blob_storage import BlobStorage
from studycompanion.services.documents import DocumentProcessor
from studycompanion.store import RecordStore, record_label

R = TypeVar("R", bound=Base)


# =============================================================================
# APP STATE
# =============================================================================


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_ai_service(request: Request) -> AIService:
    return request.app.state.ai_service


def get_blob_storage(request: Request) -> BlobStorage:
    return request.app.state.blob_storage


def get_document_processor(request: Request) -> DocumentProcessor:
    return request.app.state.document_processor


AppSettings = Annotated[Settings, Depends(get_app_settings)]
Store = Annotated[RecordStore, Depends(get_store)]
AI = Annotated[AIService, Depends(get_ai_service)]
Blobs = Annotated[BlobStorage, Depends(get_blob_storage)]
Processor = Annotated[DocumentProcessor, Depends(get_document_processor)]


# =============================================================================
# CURRENT USER
# =============================================================================


async def get_current_user(store: Store, settings: AppSettings) -> User:
    """
    Return the configured user.

    There is no login: every request acts as ``settings.default_username``,
    which is created at startup.
    """
    user = await store.get_user_by_username(settings.default_username)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]


# =============================================================================
# QUERY HELPERS (enforce user scoping)
# =============================================================================


async def get_owned_or_404(store: RecordStore, model: type[R], record_id: int, user_id: int) -> R:
    """
    Fetch a user-owned record by id.

    Usage:
        unit = await get_owned_or_404(store, Unit, unit_id, current_user.id)

    Missing and not-owned records both give 404 ("Unit not found").
    """
    record = await store.get(model, record_id)
    if record is None or record.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{record_label(model)} not found",
        )
    return record
