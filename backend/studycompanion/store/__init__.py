"""Record store backends and startup seeding."""

import logging

from studycompanion.config import Settings
from studycompanion.db.models import Unit, User
from studycompanion.store.base import RecordStore, record_label, utcnow
from studycompanion.store.memory import MemoryRecordStore
from studycompanion.store.sql import SqlRecordStore

logger = logging.getLogger(__name__)

SAMPLE_UNITS = [
    ("Anatomy", "Human body systems and structures", "#8FBC8F"),
    ("Immunology", "Immune system and defense mechanisms", "#DAA520"),
    ("Physiology", "Body functions and processes", "#B8B8B8"),
]


def build_store(settings: Settings) -> RecordStore:
    """Create the record store selected by ``settings.record_store``."""
    if settings.record_store == "sql":
        return SqlRecordStore.from_settings(settings)
    return MemoryRecordStore()


async def ensure_default_user(store: RecordStore, settings: Settings) -> User:
    """
    Return the configured user, creating it (and the sample units) on first run.
    """
    user = await store.get_user_by_username(settings.default_username)
    if user is not None:
        return user

    user = await store.add(
        User(
            username=settings.default_username,
            name=settings.default_user_display_name,
            pace=settings.default_pace,
        )
    )
    logger.info("Created default user %r (id=%d)", user.username, user.id)

    if settings.seed_sample_units:
        for name, description, color in SAMPLE_UNITS:
            await store.add(Unit(user_id=user.id, name=name, description=description, color=color))
        logger.info("Seeded %d sample units", len(SAMPLE_UNITS))

    return user


__all__ = [
    "MemoryRecordStore",
    "RecordStore",
    "SqlRecordStore",
    "build_store",
    "ensure_default_user",
    "record_label",
    "utcnow",
]
