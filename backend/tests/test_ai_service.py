"""Tests for the AI service, using a fake Anthropic client."""

from datetime import date

import httpx
import pytest
from anthropic import APIConnectionError

from studycompanion.config import Settings
from studycompanion.exceptions import AIResponseFormatError, AIServiceError
from studycompanion.services.ai_service import (
    BREAK_MESSAGES,
    AIService,
    Deadline,
    SearchableDocument,
    extract_suggestions,
    strip_code_fence,
)

QUIZ = {
    "quiz": {
        "title": "Cardiac cycle",
        "questions": [
            {
                "type": "multiple_choice",
                "question": "Which valve closes first?",
                "options": ["Mitral", "Aortic"],
                "correct": "Mitral",
                "explanation": "Ventricular systole closes the AV valves.",
            }
        ],
    }
}


def connection_error() -> APIConnectionError:
    return APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))


# =============================================================================
# Helpers
# =============================================================================


def test_extract_suggestions_keywords():
    text = "Let's build a STUDY PLAN, then a quick test. Remember to rest!"
    assert extract_suggestions(text) == [
        "Generate a study plan",
        "Create a practice quiz",
        "Take a break",
    ]


def test_extract_suggestions_none():
    assert extract_suggestions("The heart has four chambers.") == []


def test_strip_code_fence():
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'


# =============================================================================
# Chat and summaries
# =============================================================================


async def test_chat_sends_persona_and_history(ai_service, fake_llm):
    fake_llm.messages.queue("Sure! Want me to make a quiz?")
    history = [
        {"role": "assistant", "content": "Welcome back"},
        {"role": "user", "content": "Explain the heart"},
        {"role": "assistant", "content": "It pumps blood"},
    ]

    reply = await ai_service.chat("Test me on it", history)

    assert reply.content == "Sure! Want me to make a quiz?"
    assert reply.suggestions == ["Create a practice quiz"]
    call = fake_llm.messages.calls[0]
    assert "Mitchell" in call["system"]
    assert call["messages"][0] == {"role": "user", "content": "Explain the heart"}
    assert call["messages"][-1] == {"role": "user", "content": "Test me on it"}
    assert len(call["messages"]) == 3


async def test_summarize_includes_context_and_length(ai_service, fake_llm):
    fake_llm.messages.queue("- Point one")

    summary = await ai_service.summarize("Long text", context="Document: heart.pdf", max_length=500)

    assert summary == "- Point one"
    prompt = fake_llm.messages.calls[0]["messages"][0]["content"]
    assert "Document: heart.pdf" in prompt
    assert "500 words" in prompt


async def test_upstream_failure_raises_service_error(ai_service, fake_llm):
    fake_llm.messages.queue(connection_error())

    with pytest.raises(AIServiceError, match="AI chat failed"):
        await ai_service.chat("hello")


async def test_missing_api_key_is_reported():
    service = AIService(Settings(_env_file=None, anthropic_api_key=""))
    with pytest.raises(AIServiceError, match="ANTHROPIC_API_KEY"):
        await service.chat("hello")


# =============================================================================
# Structured outputs
# =============================================================================


async def test_generate_quiz_validates_payload(ai_service, fake_llm):
    fake_llm.messages.queue(QUIZ)

    result = await ai_service.generate_quiz("Cardiac cycle", "hard", 1)

    assert result.quiz.title == "Cardiac cycle"
    assert result.quiz.questions[0].correct == "Mitral"
    assert "hard difficulty" in fake_llm.messages.calls[0]["messages"][0]["content"]


async def test_fenced_json_is_accepted(ai_service, fake_llm):
    fake_llm.messages.queue('```json\n{"schedule": []}\n```')
    result = await ai_service.generate_study_plan(["Anatomy"], [], 40, 3)
    assert result.schedule == []


async def test_malformed_json_raises_format_error(ai_service, fake_llm):
    fake_llm.messages.queue("Here is your quiz: question one...")

    with pytest.raises(AIResponseFormatError) as exc_info:
        await ai_service.generate_quiz("Cells")

    assert exc_info.value.status_code == 502


async def test_wrong_shape_raises_format_error(ai_service, fake_llm):
    fake_llm.messages.queue({"quiz": {"title": "Empty", "questions": []}})

    with pytest.raises(AIResponseFormatError):
        await ai_service.generate_quiz("Cells")


async def test_study_plan_prompt_lists_deadlines(ai_service, fake_llm):
    fake_llm.messages.queue(
        {
            "schedule": [
                {
                    "day": "Monday",
                    "sessions": [{"subject": "Anatomy", "time": "14:30-15:30", "topic": "Heart", "type": "study"}],
                }
            ]
        }
    )

    result = await ai_service.generate_study_plan(
        subjects=["Anatomy", "Physiology"],
        deadlines=[Deadline(subject="Anatomy", date=date(2025, 3, 14), type="exam")],
        pace=60,
        available_hours=2.5,
    )

    assert result.schedule[0].sessions[0].topic == "Heart"
    prompt = fake_llm.messages.calls[0]["messages"][0]["content"]
    assert "Anatomy (exam) - Due: Fri Mar 14 2025" in prompt
    assert "60/80" in prompt
    assert "2.5" in prompt


async def test_relevant_content_sorted_and_filtered(ai_service, fake_llm):
    documents = [
        SearchableDocument(id=1, title="heart.pdf", content="The heart..."),
        SearchableDocument(id=2, title="lungs.pdf", content="The lungs..."),
    ]
    fake_llm.messages.queue(
        {
            "documents": [
                {"id": 1, "relevance": 0.4, "excerpt": "mentions valves"},
                {"id": 99, "relevance": 0.9, "excerpt": "made up"},
                {"id": 2, "relevance": 0.8, "excerpt": "gas exchange"},
            ]
        }
    )

    ranked = await ai_service.find_relevant_content("breathing", documents)

    assert [r.id for r in ranked] == [2, 1]


async def test_relevant_content_without_documents_skips_model(ai_service, fake_llm):
    assert await ai_service.find_relevant_content("anything", []) == []
    assert fake_llm.messages.calls == []


# =============================================================================
# Break suggestions
# =============================================================================


@pytest.mark.parametrize(
    "minutes, day, expected",
    [
        (119, "Monday", False),
        (120, "Monday", True),
        (89, "Saturday", False),
        (90, "Sunday", True),
    ],
)
def test_break_thresholds(ai_service, minutes, day, expected):
    suggestion = ai_service.check_for_break_suggestion(minutes, day)
    assert (suggestion is not None) is expected


def test_break_message_is_personalised(ai_service):
    suggestion = ai_service.check_for_break_suggestion(200, "Tuesday")
    assert suggestion in [m.format(name="Mitchell") for m in BREAK_MESSAGES]
