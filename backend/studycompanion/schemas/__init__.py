"""Pydantic schemas for API request/response validation."""

from studycompanion.schemas.user import PaceUpdate, UserRead
from studycompanion.schemas.units import UnitCreate, UnitRead, UnitWithProgress
from studycompanion.schemas.documents import DocumentRead, DocumentUploadResponse, DocumentWithText
from studycompanion.schemas.notes import NoteCreate, NoteRead, NoteUpdate
from studycompanion.schemas.summaries import SummaryRead
from studycompanion.schemas.assignments import (
    AssignmentCreate,
    AssignmentRead,
    AssignmentUpdate,
    AssignmentWithUrgency,
)
from studycompanion.schemas.study_plan import DailyPlanRead, StudyPlanEntryCreate, StudyPlanEntryRead
from studycompanion.schemas.study_sessions import (
    StudySessionCreate,
    StudySessionRead,
    StudySessionRecorded,
)
from studycompanion.schemas.chat import ChatMessageRead, ChatMessageRequest, ChatReplyResponse
from studycompanion.schemas.dashboard import DashboardRead, TodaysProgressRead
from studycompanion.schemas.ai import (
    QuizRequest,
    QuizResult,
    RelevantContent,
    RelevantContentRequest,
    StudyPlanGenerateRequest,
    StudyPlanResult,
)

__all__ = [
    # User
    "PaceUpdate",
    "UserRead",
    # Units
    "UnitCreate",
    "UnitRead",
    "UnitWithProgress",
    # Documents
    "DocumentRead",
    "DocumentUploadResponse",
    "DocumentWithText",
    # Notes
    "NoteCreate",
    "NoteRead",
    "NoteUpdate",
    # Summaries
    "SummaryRead",
    # Assignments
    "AssignmentCreate",
    "AssignmentRead",
    "AssignmentUpdate",
    "AssignmentWithUrgency",
    # Study plan
    "DailyPlanRead",
    "StudyPlanEntryCreate",
    "StudyPlanEntryRead",
    # Study sessions
    "StudySessionCreate",
    "StudySessionRead",
    "StudySessionRecorded",
    # Chat
    "ChatMessageRead",
    "ChatMessageRequest",
    "ChatReplyResponse",
    # Dashboard
    "DashboardRead",
    "TodaysProgressRead",
    # AI
    "QuizRequest",
    "QuizResult",
    "RelevantContent",
    "RelevantContentRequest",
    "StudyPlanGenerateRequest",
    "StudyPlanResult",
]
