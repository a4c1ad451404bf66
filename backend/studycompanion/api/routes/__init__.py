"""API routes package."""

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

__all__ = [
    "ai",
    "assignments",
    "chat",
    "dashboard",
    "documents",
    "notes",
    "study_plan",
    "study_sessions",
    "summaries",
    "units",
    "users",
]
