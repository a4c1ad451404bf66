"""
StudyCompanion FastAPI Application Entry Point.

Run with: uvicorn studycompanion.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from studycompanion.api.routes import (
    ai,
    assignments,
    chat,
    dashboard,
    documents,
    notes,
    study_plan,
    study_sessions,
    summaries,
    units,
    users,
)
from studycompanion.config import Settings, get_settings, sanitize_error
from studycompanion.exceptions import StudyCompanionError
from studycompanion.services.ai_service import AIService
from studycompanion.services.blob_storage import BlobStorage, build_blob_storage
from studycompanion.services.documents import DocumentProcessor
from studycompanion.store import RecordStore, build_store, ensure_default_user

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one readable line: ``pace: Input should be ...``."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts) or "Invalid request"


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Every error leaves the API as ``{"message": ...}``."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _validation_message(exc)},
        )

    @app.exception_handler(StudyCompanionError)
    async def app_exception_handler(request: Request, exc: StudyCompanionError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": sanitize_error(exc, settings=settings)},
        )


def create_app(
    settings: Settings | None = None,
    store: RecordStore | None = None,
    ai_service: AIService | None = None,
    blob_storage: BlobStorage | None = None,
) -> FastAPI:
    """
    Build the application.

    Anything not passed in is built from ``settings``. The objects are kept
    on ``app.state`` and reach the routes through ``studycompanion.api.deps``.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager for startup/shutdown."""
        # Startup
        await ensure_default_user(app.state.store, settings)
        yield
        # Shutdown
        await app.state.store.close()

    app = FastAPI(
        title=settings.app_name,
        description="Personal study organizer and AI study assistant API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store or build_store(settings)
    app.state.ai_service = ai_service or AIService(settings)
    app.state.blob_storage = blob_storage or build_blob_storage(settings)
    app.state.document_processor = DocumentProcessor(settings.max_upload_size_bytes)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app, settings)

    # Include routers
    for module in (
        users,
        units,
        documents,
        notes,
        summaries,
        assignments,
        study_plan,
        study_sessions,
        chat,
        ai,
        dashboard,
    ):
        app.include_router(module.router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
