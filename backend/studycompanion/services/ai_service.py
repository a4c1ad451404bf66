"""LLM-backed study assistant: chat, summaries, study plans, quizzes and search."""

import logging
import random
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import TypeVar

from anthropic import APIError, AsyncAnthropic
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from studycompanion.config import Settings
from studycompanion.exceptions import AIResponseFormatError, AIServiceError
from studycompanion.schemas.ai import QuizResult, RelevantContent, RelevantContentResult, StudyPlanResult

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_FALLBACK_PERSONA = (
    "You are StudyCompanion, a personal study assistant for {name}. "
    "Be kind, encouraging and concise. Never overwrite the user's notes or summaries without approval."
)


def _load_persona() -> str:
    """Load the PERSONA.md template for the system prompt."""
    persona_path = Path(__file__).parent.parent.parent / "PERSONA.md"
    try:
        return persona_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("PERSONA.md not found at %s, using fallback persona", persona_path)
        return _FALLBACK_PERSONA


# Load once at module import
_PERSONA_TEMPLATE = _load_persona()

# Keyword(s) found in a reply -> follow-up action offered to the user
SUGGESTION_RULES: list[tuple[tuple[str, ...], str]] = [
    (("study plan",), "Generate a study plan"),
    (("quiz", "test"), "Create a practice quiz"),
    (("summary", "summarize"), "Summarize this content"),
    (("break", "rest"), "Take a break"),
]

BREAK_MESSAGES = [
    "Hey {name}, you've been studying hard! Time for a well-deserved break. 🌟",
    "Great progress today! Your brain will thank you for a short break. ☕",
    "You're doing amazing! Let's take a breather and come back refreshed. 🌱",
    "Study sessions are most effective with regular breaks. You've earned this one! ⭐",
]

WEEKEND_DAYS = ("Saturday", "Sunday")

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass
class ChatReply:
    content: str
    suggestions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Deadline:
    subject: str
    date: date
    type: str


@dataclass(frozen=True)
class SearchableDocument:
    id: int
    title: str
    content: str


def extract_suggestions(content: str) -> list[str]:
    """Offer follow-up actions based on words used in an assistant reply."""
    lowered = content.lower()
    return [label for keywords, label in SUGGESTION_RULES if any(k in lowered for k in keywords)]


def strip_code_fence(text: str) -> str:
    """Models sometimes wrap JSON in a markdown fence; unwrap it."""
    text = text.strip()
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


class AIService:
    """
    Single-shot calls to the Anthropic API with a fixed persona.

    Every call has an explicit timeout and is never retried. Upstream
    failures raise AIServiceError; structured answers that do not match the
    expected schema raise AIResponseFormatError.
    """

    def __init__(self, settings: Settings, client: AsyncAnthropic | None = None):
        self.settings = settings
        self._client = client
        self.system_prompt = _PERSONA_TEMPLATE.format(name=settings.default_user_display_name)

    @property
    def client(self) -> AsyncAnthropic:
        """Anthropic client, created on first use."""
        if self._client is None:
            if not self.settings.anthropic_api_key:
                raise AIServiceError("AI assistant is not configured (ANTHROPIC_API_KEY is missing)")
            self._client = AsyncAnthropic(
                api_key=self.settings.anthropic_api_key,
                timeout=self.settings.llm_timeout_seconds,
                max_retries=self.settings.llm_max_retries,
            )
        return self._client

    # -------------------------------------------------------------------------
    # Low-level calls
    # -------------------------------------------------------------------------

    async def _complete(
        self,
        operation: str,
        messages: list[dict],
        *,
        max_tokens: int,
        temperature: float,
    ) -> str:
        try:
            response = await self.client.messages.create(
                model=self.settings.llm_model,
                max_tokens=max_tokens,
                system=self.system_prompt,
                messages=messages,
                temperature=temperature,
            )
        except APIError as e:
            logger.error("%s failed: %s", operation, e)
            raise AIServiceError(f"{operation} failed: {e}") from e

        return "".join(getattr(block, "text", "") for block in response.content)

    async def _complete_json(
        self,
        operation: str,
        prompt: str,
        schema: type[T],
        *,
        max_tokens: int,
        temperature: float,
    ) -> T:
        raw = await self._complete(
            operation,
            [{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        try:
            return schema.model_validate_json(strip_code_fence(raw))
        except PydanticValidationError as e:
            logger.warning("%s returned an invalid payload: %s", operation, e)
            raise AIResponseFormatError(
                f"{operation} failed: the assistant's answer did not match the expected format"
            ) from e

    # -------------------------------------------------------------------------
    # Features
    # -------------------------------------------------------------------------

    async def chat(self, message: str, history: Sequence[dict] | None = None) -> ChatReply:
        """
        Answer one chat turn.

        Args:
            message: The user's new message
            history: Earlier messages (dicts with 'role' and 'content'), oldest first
        """
        turns = [{"role": m["role"], "content": m["content"]} for m in history or []]
        # The conversation sent to the model has to open with a user turn
        while turns and turns[0]["role"] != "user":
            turns.pop(0)
        turns.append({"role": "user", "content": message})

        content = await self._complete(
            "AI chat",
            turns,
            max_tokens=self.settings.llm_chat_max_tokens,
            temperature=0.7,
        )
        return ChatReply(content=content, suggestions=extract_suggestions(content))

    async def summarize(
        self,
        text: str,
        context: str | None = None,
        max_length: int | None = None,
    ) -> str:
        """Study-friendly summary of ``text``; ``max_length`` is in words."""
        parts = [
            "Please create a concise summary of the following study material.",
            "Focus on key concepts, important details, and main takeaways.",
        ]
        if context:
            parts.append(f"Context: {context}")
        if max_length:
            parts.append(f"Keep it under {max_length} words.")
        parts.append(f"Study Material:\n{text}")
        parts.append(
            "Please format the summary in a clear, study-friendly way with bullet points "
            "or numbered lists where appropriate."
        )
        return await self._complete(
            "Summary generation",
            [{"role": "user", "content": "\n\n".join(parts)}],
            max_tokens=self.settings.llm_summary_max_tokens,
            temperature=0.3,
        )

    async def generate_study_plan(
        self,
        subjects: Sequence[str],
        deadlines: Sequence[Deadline],
        pace: int,
        available_hours: float,
    ) -> StudyPlanResult:
        """Weekly schedule that front-loads subjects with close deadlines."""
        deadline_lines = ", ".join(
            f"{d.subject} ({d.type}) - Due: {d.date.strftime('%a %b %d %Y')}" for d in deadlines
        ) or "None"
        prompt = f"""Create a personalized study plan with the following parameters:

Subjects: {", ".join(subjects) or "None"}
Deadlines: {deadline_lines}
Learning Pace: {pace}/80 (1=relaxed, 80=intensive)
Available Study Hours per Day: {available_hours:g}

Build a weekly study schedule that:
1. Prioritizes subjects with approaching deadlines
2. Balances study load according to the pace setting
3. Includes regular breaks and review sessions
4. Suggests optimal study times based on the material type

Respond with JSON only, no prose, in this format:
{{"schedule": [{{"day": "Monday", "sessions": [{{"subject": "Anatomy", "time": "14:30-15:30", "topic": "Nervous System", "type": "study"}}]}}]}}"""
        return await self._complete_json(
            "Study plan generation",
            prompt,
            StudyPlanResult,
            max_tokens=self.settings.llm_structured_max_tokens,
            temperature=0.5,
        )

    async def generate_quiz(
        self,
        topic: str,
        difficulty: str = "medium",
        question_count: int = 5,
    ) -> QuizResult:
        prompt = f"""Generate a {difficulty} difficulty quiz on the topic: {topic}

Create {question_count} questions that test understanding, not just memorization.
Include a mix of multiple choice, short answer, and scenario-based questions.

Respond with JSON only, no prose, in this format:
{{"quiz": {{"title": "Quiz Title", "questions": [{{"type": "multiple_choice", "question": "...", "options": ["A", "B", "C", "D"], "correct": "B", "explanation": "..."}}]}}}}"""
        return await self._complete_json(
            "Quiz generation",
            prompt,
            QuizResult,
            max_tokens=self.settings.llm_structured_max_tokens,
            temperature=0.6,
        )

    async def find_relevant_content(
        self,
        query: str,
        documents: Sequence[SearchableDocument],
    ) -> list[RelevantContent]:
        """Rank ``documents`` against ``query``, most relevant first."""
        if not documents:
            return []

        excerpt_chars = self.settings.relevant_content_excerpt_chars
        listing = "\n".join(
            f"{doc.id}. {doc.title}: {doc.content[:excerpt_chars]}..." for doc in documents
        )
        prompt = f"""Find the most relevant study materials for this query: "{query}"

Available documents (id. title: beginning of text):
{listing}

Rank the relevant documents by relevance (0-1 score) and give a brief excerpt explaining why each is relevant.

Respond with JSON only, no prose, in this format:
{{"documents": [{{"id": 1, "relevance": 0.9, "excerpt": "This section covers..."}}]}}"""
        result = await self._complete_json(
            "Content search",
            prompt,
            RelevantContentResult,
            max_tokens=self.settings.llm_chat_max_tokens,
            temperature=0.3,
        )

        known_ids = {doc.id for doc in documents}
        ranked = [item for item in result.documents if item.id in known_ids]
        ranked.sort(key=lambda item: item.relevance, reverse=True)
        return ranked

    def check_for_break_suggestion(self, minutes_studied: int, day_of_week: str) -> str | None:
        """
        Nudge towards a break once a day's study time passes a threshold.

        Weekends get the lower threshold. This is a fixed rule, the model is
        not consulted.
        """
        if day_of_week in WEEKEND_DAYS:
            threshold = self.settings.weekend_break_threshold_minutes
        else:
            threshold = self.settings.weekday_break_threshold_minutes

        if minutes_studied < threshold:
            return None
        return random.choice(BREAK_MESSAGES).format(name=self.settings.default_user_display_name)
