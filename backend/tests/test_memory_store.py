"""Tests for the in-memory record store."""

import asyncio
from datetime import date, datetime, timezone

import pytest

from studycompanion.config import Settings
from studycompanion.db.models import (
    Assignment,
    ChatMessage,
    Document,
    Note,
    StudyPlanEntry,
    Summary,
    Unit,
    User,
)
from studycompanion.exceptions import NotFoundError
from studycompanion.store import SAMPLE_UNITS, MemoryRecordStore, ensure_default_user

DEADLINE = datetime(2030, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def mem() -> MemoryRecordStore:
    return MemoryRecordStore()


async def _unit_with_content(store: MemoryRecordStore):
    user = await store.add(User(username="u", name="U"))
    unit = await store.add(Unit(user_id=user.id, name="Anatomy"))
    document = await store.add(
        Document(
            user_id=user.id,
            unit_id=unit.id,
            filename="1_ab.pdf",
            original_name="heart.pdf",
            mime_type="application/pdf",
            size=10,
            storage_location="uploads/1_ab.pdf",
        )
    )
    return user, unit, document


async def test_ids_are_unique_and_increasing_across_kinds(mem):
    user = await mem.add(User(username="u", name="U"))
    unit = await mem.add(Unit(user_id=user.id, name="Anatomy"))
    message = await mem.add(ChatMessage(user_id=user.id, role="user", content="hi"))
    assert user.id < unit.id < message.id


async def test_concurrent_adds_get_distinct_ids(mem):
    records = await asyncio.gather(*(mem.add(Unit(user_id=1, name=f"u{i}")) for i in range(50)))
    assert len({r.id for r in records}) == 50


async def test_add_applies_column_defaults(mem):
    user = await mem.add(User(username="u", name="U"))
    unit = await mem.add(Unit(user_id=user.id, name="Anatomy"))
    assert user.pace == 40
    assert unit.color == "#8FBC8F"
    assert unit.created_at is not None


async def test_update_missing_record_raises(mem):
    with pytest.raises(NotFoundError, match="Unit not found"):
        await mem.update(Unit, 999, name="x")


async def test_update_bumps_note_updated_at(mem):
    user, unit, _ = await _unit_with_content(mem)
    note = await mem.add(Note(user_id=user.id, unit_id=unit.id, content="first"))
    before = note.updated_at
    updated = await mem.update(Note, note.id, content="second")
    assert updated.content == "second"
    assert updated.updated_at >= before


async def test_delete_missing_record_raises(mem):
    with pytest.raises(NotFoundError, match="Study plan entry not found"):
        await mem.delete(StudyPlanEntry, 123)


async def test_deleting_unit_cascades(mem):
    user, unit, document = await _unit_with_content(mem)
    note = await mem.add(Note(user_id=user.id, unit_id=unit.id, content="n"))
    summary = await mem.add(Summary(user_id=user.id, unit_id=unit.id, document_id=document.id, content="s"))
    task = await mem.add(Assignment(user_id=user.id, unit_id=unit.id, title="t", deadline=DEADLINE))
    block = await mem.add(
        StudyPlanEntry(
            user_id=user.id,
            unit_id=unit.id,
            title="b",
            scheduled_date=date(2025, 1, 1),
            start_time="09:00",
            end_time="10:00",
            estimated_minutes=60,
        )
    )

    await mem.delete(Unit, unit.id)

    assert await mem.get(Unit, unit.id) is None
    assert await mem.get(Document, document.id) is None
    assert await mem.get(Note, note.id) is None
    assert await mem.get(Summary, summary.id) is None
    assert (await mem.get(Assignment, task.id)).unit_id is None
    assert (await mem.get(StudyPlanEntry, block.id)).unit_id is None


async def test_deleting_document_unlinks_notes_and_drops_summaries(mem):
    user, unit, document = await _unit_with_content(mem)
    note = await mem.add(Note(user_id=user.id, unit_id=unit.id, document_id=document.id, content="n"))
    summary = await mem.add(Summary(user_id=user.id, document_id=document.id, content="s"))

    await mem.delete(Document, document.id)

    assert (await mem.get(Note, note.id)).document_id is None
    assert await mem.get(Summary, summary.id) is None
    assert await mem.get(Unit, unit.id) is not None


async def test_study_sessions_accumulate_per_day(mem):
    day = date(2025, 3, 10)
    first = await mem.record_study_session(1, day, minutes_studied=30, topics_completed=1)
    second = await mem.record_study_session(1, day, minutes_studied=30, topics_completed=1)

    assert first.id == second.id
    assert second.minutes_studied == 60
    assert second.topics_completed == 2
    assert len(await mem.list_study_sessions(1)) == 1


async def test_concurrent_session_posts_accumulate(mem):
    day = date(2025, 3, 10)
    await asyncio.gather(*(mem.record_study_session(1, day, 10, 1) for _ in range(10)))
    [session] = await mem.list_study_sessions(1)
    assert session.minutes_studied == 100
    assert session.topics_completed == 10


async def test_study_sessions_newest_first_with_limit(mem):
    for d in (1, 3, 2):
        await mem.record_study_session(1, date(2025, 3, d), 10, 1)
    sessions = await mem.list_study_sessions(1, limit=2)
    assert [s.date.day for s in sessions] == [3, 2]


async def test_chat_messages_limit_returns_most_recent_in_order(mem):
    for i in range(5):
        await mem.add(ChatMessage(user_id=1, role="user", content=f"m{i}"))
    messages = await mem.list_chat_messages(1, limit=3)
    assert [m.content for m in messages] == ["m2", "m3", "m4"]


async def test_list_summaries_filters(mem):
    await mem.add(Summary(user_id=1, unit_id=10, content="a", approved=True))
    await mem.add(Summary(user_id=1, unit_id=10, content="b"))
    await mem.add(Summary(user_id=1, unit_id=11, content="c"))

    assert [s.content for s in await mem.list_summaries(1, unit_id=10)] == ["a", "b"]
    assert [s.content for s in await mem.list_summaries(1, approved=False)] == ["b", "c"]


async def test_ensure_default_user_seeds_once(mem):
    settings = Settings(_env_file=None)
    user = await ensure_default_user(mem, settings)
    again = await ensure_default_user(mem, settings)

    assert user.id == again.id
    assert user.name == "Mitchell"
    assert user.pace == 40
    units = await mem.list_units(user.id)
    assert [u.name for u in units] == [name for name, _, _ in SAMPLE_UNITS]
