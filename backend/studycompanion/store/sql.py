"""Relational record store on async SQLAlchemy."""

import logging
from datetime import date

from sqlalchemy import Select, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from studycompanion.config import Settings
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
from studycompanion.db.session import create_engine_from_settings, create_session_factory
from studycompanion.exceptions import NotFoundError
from studycompanion.store.base import R, RecordStore, record_label, utcnow

logger = logging.getLogger(__name__)


class SqlRecordStore(RecordStore):
    """
    Record store backed by a relational database.

    Each operation runs in its own session and commits before returning.
    Cascading deletes are enforced by the database through the ``ondelete``
    rules on the foreign keys.
    """

    def __init__(self, engine: AsyncEngine, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self.engine = engine
        self.session_factory = session_factory or create_session_factory(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SqlRecordStore":
        return cls(create_engine_from_settings(settings))

    async def create_schema(self) -> None:
        """Create all tables (tests and local development; production uses Alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    async def _all(self, query: Select) -> list:
        async with self.session_factory() as db:
            result = await db.execute(query)
            return list(result.scalars())

    # -------------------------------------------------------------------------
    # Generic record operations
    # -------------------------------------------------------------------------

    async def add(self, record: R) -> R:
        async with self.session_factory() as db:
            db.add(record)
            await db.commit()
            await db.refresh(record)
            return record

    async def get(self, model: type[R], record_id: int) -> R | None:
        async with self.session_factory() as db:
            return await db.get(model, record_id)

    async def update(self, model: type[R], record_id: int, **changes) -> R:
        async with self.session_factory() as db:
            record = await db.get(model, record_id)
            if record is None:
                raise NotFoundError(f"{record_label(model)} not found")
            for key, value in changes.items():
                setattr(record, key, value)
            if hasattr(model, "updated_at"):
                record.updated_at = utcnow()
            await db.commit()
            await db.refresh(record)
            return record

    async def delete(self, model: type[Base], record_id: int) -> None:
        async with self.session_factory() as db:
            record = await db.get(model, record_id)
            if record is None:
                raise NotFoundError(f"{record_label(model)} not found")
            await db.delete(record)
            await db.commit()
        logger.info("Deleted %s %d", model.__tablename__, record_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_user_by_username(self, username: str) -> User | None:
        async with self.session_factory() as db:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()

    async def list_units(self, user_id: int) -> list[Unit]:
        return await self._all(select(Unit).where(Unit.user_id == user_id).order_by(Unit.id))

    async def list_documents(self, unit_id: int) -> list[Document]:
        return await self._all(
            select(Document).where(Document.unit_id == unit_id).order_by(Document.id)
        )

    async def list_user_documents(self, user_id: int) -> list[Document]:
        return await self._all(
            select(Document).where(Document.user_id == user_id).order_by(Document.id)
        )

    async def list_notes(self, unit_id: int) -> list[Note]:
        return await self._all(select(Note).where(Note.unit_id == unit_id).order_by(Note.id))

    async def list_summaries(
        self,
        user_id: int,
        *,
        unit_id: int | None = None,
        document_id: int | None = None,
        approved: bool | None = None,
    ) -> list[Summary]:
        query = select(Summary).where(Summary.user_id == user_id)
        if unit_id is not None:
            query = query.where(Summary.unit_id == unit_id)
        if document_id is not None:
            query = query.where(Summary.document_id == document_id)
        if approved is not None:
            query = query.where(Summary.approved == approved)
        return await self._all(query.order_by(Summary.id))

    async def list_assignments(self, user_id: int) -> list[Assignment]:
        return await self._all(
            select(Assignment).where(Assignment.user_id == user_id).order_by(Assignment.id)
        )

    async def list_study_plan(
        self,
        user_id: int,
        day: date | None = None,
        *,
        unit_id: int | None = None,
    ) -> list[StudyPlanEntry]:
        query = select(StudyPlanEntry).where(StudyPlanEntry.user_id == user_id)
        if day is not None:
            query = query.where(StudyPlanEntry.scheduled_date == day)
        if unit_id is not None:
            query = query.where(StudyPlanEntry.unit_id == unit_id)
        return await self._all(query.order_by(StudyPlanEntry.id))

    async def list_study_sessions(self, user_id: int, limit: int = 30) -> list[StudySession]:
        return await self._all(
            select(StudySession)
            .where(StudySession.user_id == user_id)
            .order_by(StudySession.date.desc())
            .limit(limit)
        )

    async def record_study_session(
        self,
        user_id: int,
        day: date,
        minutes_studied: int,
        topics_completed: int,
    ) -> StudySession:
        # Concurrent first posts for the same day accumulate instead of conflicting
        insert = sqlite.insert if self.engine.dialect.name == "sqlite" else postgresql.insert
        stmt = insert(StudySession).values(
            user_id=user_id,
            date=day,
            minutes_studied=minutes_studied,
            topics_completed=topics_completed,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[StudySession.user_id, StudySession.date],
            set_={
                "minutes_studied": StudySession.minutes_studied + stmt.excluded.minutes_studied,
                "topics_completed": StudySession.topics_completed + stmt.excluded.topics_completed,
            },
        )
        async with self.session_factory() as db:
            record = await db.scalar(
                stmt.returning(StudySession),
                execution_options={"populate_existing": True},
            )
            await db.commit()
            return record

    async def list_chat_messages(self, user_id: int, limit: int | None = None) -> list[ChatMessage]:
        query = select(ChatMessage).where(ChatMessage.user_id == user_id)
        if limit is None:
            return await self._all(query.order_by(ChatMessage.created_at, ChatMessage.id))
        newest_first = await self._all(
            query.order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc()).limit(limit)
        )
        return list(reversed(newest_first))
