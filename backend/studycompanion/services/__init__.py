"""Services for document handling, AI calls and derived views."""

from studycompanion.services.ai_service import AIService
from studycompanion.services.blob_storage import LocalBlobStorage, S3BlobStorage, build_blob_storage
from studycompanion.services.documents import DocumentProcessor

__all__ = [
    "AIService",
    "DocumentProcessor",
    "LocalBlobStorage",
    "S3BlobStorage",
    "build_blob_storage",
]
