"""
SQLAlchemy 2.0 Models for StudyCompanion.

Uses modern declarative syntax with Mapped[] type annotations.
Every table draws its primary key from the same sequence, so an id is
unique across all record kinds. The same classes double as the record
type of the in-memory store (instances are simply never flushed there).
"""

import datetime as dt
from datetime import date, datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Sequence,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from studycompanion.db.base import Base

# One counter for every record kind
record_id_seq = Sequence("record_id_seq", metadata=Base.metadata)

DEFAULT_UNIT_COLOR = "#8FBC8F"


# =============================================================================
# ENUMS
# =============================================================================


class AssignmentType(str, PyEnum):
    """Kind of graded work."""

    ASSIGNMENT = "assignment"
    CAT = "cat"
    EXAM = "exam"


class ChatRole(str, PyEnum):
    """Role in the chat log."""

    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# MODELS
# =============================================================================


class User(Base):
    """The single person this deployment serves."""

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("pace BETWEEN 1 AND 80", name="valid_pace"),)

    id: Mapped[int] = mapped_column(record_id_seq, primary_key=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    pace: Mapped[int] = mapped_column(nullable=False, default=40)  # 1 = relaxed, 80 = intensive
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Unit(Base):
    """A study subject grouping documents, notes and plan entries."""

    __tablename__ = "units"
    __table_args__ = (Index("idx_units_user_id", "user_id"),)

    id: Mapped[int] = mapped_column(record_id_seq, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default=DEFAULT_UNIT_COLOR)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Document(Base):
    """
    Uploaded PDF or DOCX file.

    The bytes live in blob storage under ``storage_location``; the text we
    managed to extract is kept here for summaries and search.
    """

    __tablename__ = "documents"
    __table_args__ = (Index("idx_documents_unit_id", "unit_id"),)

    id: Mapped[int] = mapped_column(record_id_seq, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    unit_id: Mapped[int] = mapped_column(
        ForeignKey("units.id", ondelete="CASCADE"), nullable=False
    )
    filename: Mapped[str] = mapped_column(String(), nullable=False)  # Generated name
    original_name: Mapped[str] = mapped_column(String(), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(), nullable=False)
    size: Mapped[int] = mapped_column(nullable=False)
    storage_location: Mapped[str] = mapped_column(String(), nullable=False)
    extracted_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Note(Base):
    """Free-text note inside a unit, optionally about one document."""

    __tablename__ = "notes"
    __table_args__ = (Index("idx_notes_unit_id", "unit_id"),)

    id: Mapped[int] = mapped_column(record_id_seq, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    unit_id: Mapped[int] = mapped_column(
        ForeignKey("units.id", ondelete="CASCADE"), nullable=False
    )
    document_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("documents.id", ondelete="SET NULL"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Summary(Base):
    """
    AI-generated summary awaiting (or having received) the user's approval.

    Summaries are never merged into notes automatically.
    """

    __tablename__ = "summaries"
    __table_args__ = (Index("idx_summaries_user_id", "user_id"),)

    id: Mapped[int] = mapped_column(record_id_seq, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    document_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"), nullable=True
    )
    unit_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("units.id", ondelete="CASCADE"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    approved: Mapped[bool] = mapped_column(nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Assignment(Base):
    """Assignment, CAT or exam with a deadline."""

    __tablename__ = "assignments"
    __table_args__ = (
        Index("idx_assignments_user_deadline", "user_id", "deadline"),
        CheckConstraint("type IN ('assignment', 'cat', 'exam')", name="valid_assignment_type"),
    )

    id: Mapped[int] = mapped_column(record_id_seq, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    unit_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("units.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=AssignmentType.ASSIGNMENT.value)
    questions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed: Mapped[bool] = mapped_column(nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class StudyPlanEntry(Base):
    """One scheduled block on a given day."""

    __tablename__ = "study_plan_entries"
    __table_args__ = (
        Index("idx_study_plan_user_date", "user_id", "scheduled_date"),
        CheckConstraint("estimated_minutes > 0", name="valid_estimated_minutes"),
    )

    id: Mapped[int] = mapped_column(record_id_seq, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    unit_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("units.id", ondelete="SET NULL"), nullable=True
    )
    document_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("documents.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    scheduled_date: Mapped[date] = mapped_column(nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # "14:30"
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)  # "15:30"
    estimated_minutes: Mapped[int] = mapped_column(nullable=False)
    completed: Mapped[bool] = mapped_column(nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class StudySession(Base):
    """Per-day totals of time studied and topics finished (one row per user per day)."""

    __tablename__ = "study_sessions"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="unique_user_session_date"),
        CheckConstraint("minutes_studied >= 0 AND topics_completed >= 0", name="valid_session_totals"),
    )

    id: Mapped[int] = mapped_column(record_id_seq, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(nullable=False)
    minutes_studied: Mapped[int] = mapped_column(nullable=False, default=0)
    topics_completed: Mapped[int] = mapped_column(nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ChatMessage(Base):
    """Append-only chat log entry."""

    __tablename__ = "chat_messages"
    __table_args__ = (Index("idx_chat_messages_user_id", "user_id"),)

    id: Mapped[int] = mapped_column(record_id_seq, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(), nullable=False)  # 'user' or 'assistant'
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
