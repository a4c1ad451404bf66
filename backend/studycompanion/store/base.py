"""
Record store interface.

Route handlers talk to a ``RecordStore`` object that lives on
``app.state`` and is injected per request (see ``studycompanion.api.deps``).
Records are the ORM classes from ``studycompanion.db.models`` whichever
backend is in use:

- ``MemoryRecordStore``: dictionaries in process memory (tests, demos)
- ``SqlRecordStore``: async SQLAlchemy against Postgres (production)

Generic operations (add/get/update/delete) work for every record kind;
the ``list_*`` queries cover the filters the API needs. Deletes cascade
according to the foreign keys declared on the models.
"""

import re
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import TypeVar

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

R = TypeVar("R", bound=Base)


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def record_label(model: type[Base]) -> str:
    """Human label for a record kind: ``StudyPlanEntry`` -> ``Study plan entry``."""
    return re.sub(r"(?<!^)(?=[A-Z])", " ", model.__name__).capitalize()


class RecordStore(ABC):
    """Async access to every StudyCompanion record kind."""

    # -------------------------------------------------------------------------
    # Generic record operations
    # -------------------------------------------------------------------------

    @abstractmethod
    async def add(self, record: R) -> R:
        """Insert a record; the store assigns ``id`` and ``created_at``."""

    @abstractmethod
    async def get(self, model: type[R], record_id: int) -> R | None:
        """Fetch one record by id, or None."""

    @abstractmethod
    async def update(self, model: type[R], record_id: int, **changes) -> R:
        """
        Apply a partial update and return the updated record.

        Bumps ``updated_at`` on record kinds that have one.
        Raises NotFoundError if the record does not exist.
        """

    @abstractmethod
    async def delete(self, model: type[Base], record_id: int) -> None:
        """
        Hard-delete a record and cascade to its dependents.

        Raises NotFoundError if the record does not exist.
        """

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_user_by_username(self, username: str) -> User | None:
        ...

    @abstractmethod
    async def list_units(self, user_id: int) -> list[Unit]:
        ...

    @abstractmethod
    async def list_documents(self, unit_id: int) -> list[Document]:
        ...

    @abstractmethod
    async def list_user_documents(self, user_id: int) -> list[Document]:
        ...

    @abstractmethod
    async def list_notes(self, unit_id: int) -> list[Note]:
        ...

    @abstractmethod
    async def list_summaries(
        self,
        user_id: int,
        *,
        unit_id: int | None = None,
        document_id: int | None = None,
        approved: bool | None = None,
    ) -> list[Summary]:
        ...

    @abstractmethod
    async def list_assignments(self, user_id: int) -> list[Assignment]:
        """All assignments of a user in insertion order."""

    @abstractmethod
    async def list_study_plan(
        self,
        user_id: int,
        day: date | None = None,
        *,
        unit_id: int | None = None,
    ) -> list[StudyPlanEntry]:
        """Plan entries of a user, optionally restricted to one calendar day and/or unit."""

    @abstractmethod
    async def list_study_sessions(self, user_id: int, limit: int = 30) -> list[StudySession]:
        """Most recent sessions first (by ``date``)."""

    @abstractmethod
    async def record_study_session(
        self,
        user_id: int,
        day: date,
        minutes_studied: int,
        topics_completed: int,
    ) -> StudySession:
        """
        Upsert the session for (user, day).

        A second write for the same day adds to the stored totals instead of
        replacing them.
        """

    @abstractmethod
    async def list_chat_messages(self, user_id: int, limit: int | None = None) -> list[ChatMessage]:
        """Chat log in creation order; with ``limit`` only the most recent N."""

    async def close(self) -> None:
        """Release backend resources."""
