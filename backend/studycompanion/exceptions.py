"""
Application exceptions.

Services and the record store raise these; the handlers registered in
``studycompanion.main`` turn them into ``{"message": ...}`` responses.
"""


class StudyCompanionError(Exception):
    """Base exception for all StudyCompanion application errors."""

    status_code = 500


class ValidationError(StudyCompanionError):
    """Raised when input fails a business rule (bad pace, bad upload, ...)."""

    status_code = 400


class NotFoundError(StudyCompanionError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class ExtractionError(StudyCompanionError):
    """Raised when text cannot be extracted from an uploaded document."""

    status_code = 422


class AIServiceError(StudyCompanionError):
    """Raised when a call to the language model fails."""

    status_code = 500


class AIResponseFormatError(AIServiceError):
    """Raised when the model answers, but not in the shape we asked for."""

    status_code = 502


class StorageError(StudyCompanionError):
    """Raised when document bytes cannot be written to or removed from blob storage."""

    status_code = 500
