"""In-memory record store."""

import asyncio
import itertools
import threading
from collections import defaultdict
from collections.abc import Iterator
from datetime import date

from studycompanion.db.base import Base
from studycompanion.db.models import (
    Assignment,
    ChatMessage,
    Document,
    Note,
    StudyPlanEntry,
    StudySession,
    Summary,
    Unit,
    User,
)
from studycompanion.exceptions import NotFoundError
from studycompanion.store.base import R, RecordStore, record_label, utcnow


def _dependents(model: type[Base]) -> Iterator[tuple[type[Base], str, str | None]]:
    """Yield (child model, column key, ondelete) for every foreign key pointing at ``model``."""
    for mapper in Base.registry.mappers:
        child = mapper.class_
        for column in child.__table__.columns:
            for fk in column.foreign_keys:
                if fk.column.table is model.__table__:
                    yield child, column.key, fk.ondelete


def _apply_defaults(record: Base) -> None:
    """Fill unset attributes from scalar column defaults (normally done at flush time)."""
    for column in type(record).__table__.columns:
        default = column.default
        if default is not None and default.is_scalar and getattr(record, column.key) is None:
            setattr(record, column.key, default.arg)


class MemoryRecordStore(RecordStore):
    """
    Record store backed by per-kind dictionaries.

    Identifiers come from one counter shared by every record kind. The
    increment is guarded by a lock so concurrent creates never collide.
    """

    def __init__(self) -> None:
        self._tables: dict[type[Base], dict[int, Base]] = defaultdict(dict)
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()
        self._session_lock = asyncio.Lock()

    def _next_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    def _rows(self, model: type[R]) -> list[R]:
        return list(self._tables[model].values())

    # -------------------------------------------------------------------------
    # Generic record operations
    # -------------------------------------------------------------------------

    async def add(self, record: R) -> R:
        model = type(record)
        _apply_defaults(record)
        record.id = self._next_id()
        now = utcnow()
        for attr in ("created_at", "updated_at"):
            if hasattr(model, attr) and getattr(record, attr) is None:
                setattr(record, attr, now)
        self._tables[model][record.id] = record
        return record

    async def get(self, model: type[R], record_id: int) -> R | None:
        return self._tables[model].get(record_id)

    async def update(self, model: type[R], record_id: int, **changes) -> R:
        record = self._tables[model].get(record_id)
        if record is None:
            raise NotFoundError(f"{record_label(model)} not found")
        for key, value in changes.items():
            setattr(record, key, value)
        if hasattr(model, "updated_at"):
            record.updated_at = utcnow()
        return record

    async def delete(self, model: type[Base], record_id: int) -> None:
        if record_id not in self._tables[model]:
            raise NotFoundError(f"{record_label(model)} not found")
        self._cascade_delete(model, record_id)

    def _cascade_delete(self, model: type[Base], record_id: int) -> None:
        for child, key, ondelete in _dependents(model):
            for row in self._rows(child):
                if getattr(row, key) != record_id:
                    continue
                if ondelete == "CASCADE":
                    self._cascade_delete(child, row.id)
                elif ondelete == "SET NULL":
                    setattr(row, key, None)
        self._tables[model].pop(record_id, None)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self._rows(User) if u.username == username), None)

    async def list_units(self, user_id: int) -> list[Unit]:
        return [u for u in self._rows(Unit) if u.user_id == user_id]

    async def list_documents(self, unit_id: int) -> list[Document]:
        return [d for d in self._rows(Document) if d.unit_id == unit_id]

    async def list_user_documents(self, user_id: int) -> list[Document]:
        return [d for d in self._rows(Document) if d.user_id == user_id]

    async def list_notes(self, unit_id: int) -> list[Note]:
        return [n for n in self._rows(Note) if n.unit_id == unit_id]

    async def list_summaries(
        self,
        user_id: int,
        *,
        unit_id: int | None = None,
        document_id: int | None = None,
        approved: bool | None = None,
    ) -> list[Summary]:
        summaries = [s for s in self._rows(Summary) if s.user_id == user_id]
        if unit_id is not None:
            summaries = [s for s in summaries if s.unit_id == unit_id]
        if document_id is not None:
            summaries = [s for s in summaries if s.document_id == document_id]
        if approved is not None:
            summaries = [s for s in summaries if s.approved == approved]
        return summaries

    async def list_assignments(self, user_id: int) -> list[Assignment]:
        return [a for a in self._rows(Assignment) if a.user_id == user_id]

    async def list_study_plan(
        self,
        user_id: int,
        day: date | None = None,
        *,
        unit_id: int | None = None,
    ) -> list[StudyPlanEntry]:
        entries = [e for e in self._rows(StudyPlanEntry) if e.user_id == user_id]
        if day is not None:
            entries = [e for e in entries if e.scheduled_date == day]
        if unit_id is not None:
            entries = [e for e in entries if e.unit_id == unit_id]
        return entries

    async def list_study_sessions(self, user_id: int, limit: int = 30) -> list[StudySession]:
        sessions = [s for s in self._rows(StudySession) if s.user_id == user_id]
        sessions.sort(key=lambda s: s.date, reverse=True)
        return sessions[:limit]

    async def record_study_session(
        self,
        user_id: int,
        day: date,
        minutes_studied: int,
        topics_completed: int,
    ) -> StudySession:
        async with self._session_lock:
            existing = next(
                (s for s in self._rows(StudySession) if s.user_id == user_id and s.date == day),
                None,
            )
            if existing is not None:
                existing.minutes_studied += minutes_studied
                existing.topics_completed += topics_completed
                return existing
            return await self.add(
                StudySession(
                    user_id=user_id,
                    date=day,
                    minutes_studied=minutes_studied,
                    topics_completed=topics_completed,
                )
            )

    async def list_chat_messages(self, user_id: int, limit: int | None = None) -> list[ChatMessage]:
        messages = [m for m in self._rows(ChatMessage) if m.user_id == user_id]
        messages.sort(key=lambda m: (m.created_at, m.id))
        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return messages
