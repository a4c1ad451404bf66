"""
Schemas for AI features.

The ``*Result`` models double as the expected shape of the model's JSON
answers; anything that does not validate is rejected by the AI service.
"""

from typing import Literal

from pydantic import Field

from studycompanion.schemas.base import BaseSchema

DifficultyType = Literal["easy", "medium", "hard"]


# Request schemas
class QuizRequest(BaseSchema):
    """Request to generate a practice quiz."""

    topic: str = Field(..., min_length=1, max_length=500)
    difficulty: DifficultyType = "medium"
    count: int = Field(5, ge=1, le=20)


class RelevantContentRequest(BaseSchema):
    """Request to rank the user's documents against a query."""

    query: str = Field(..., min_length=1, max_length=2000)
    unit_id: int | None = None


class StudyPlanGenerateRequest(BaseSchema):
    """Request to draft a weekly schedule from the user's units and deadlines."""

    available_hours: float = Field(3, gt=0, le=24)
    unit_ids: list[int] | None = None


# Model output schemas
class PlanSession(BaseSchema):
    subject: str
    time: str
    topic: str
    type: str = "study"


class PlanDay(BaseSchema):
    day: str
    sessions: list[PlanSession]


class StudyPlanResult(BaseSchema):
    """Weekly schedule drafted by the model."""

    schedule: list[PlanDay]


class QuizQuestion(BaseSchema):
    type: str
    question: str
    options: list[str] = Field(default_factory=list)
    correct: str
    explanation: str | None = None


class Quiz(BaseSchema):
    title: str
    questions: list[QuizQuestion] = Field(..., min_length=1)


class QuizResult(BaseSchema):
    quiz: Quiz


class RelevantContent(BaseSchema):
    """One ranked document with the model's reason for including it."""

    id: int
    relevance: float = Field(..., ge=0, le=1)
    excerpt: str


class RelevantContentResult(BaseSchema):
    documents: list[RelevantContent]
