"""Unit routes, enriched with progress figures."""

import logging

from fastapi import APIRouter, status

from studycompanion.api.deps import AppSettings, Blobs, CurrentUser, Store, get_owned_or_404
from studycompanion.config import Settings
from studycompanion.db.models import Unit
from studycompanion.schemas.units import UnitCreate, UnitRead, UnitWithProgress
from studycompanion.services.progress import local_today, unit_progress_from_plan
from studycompanion.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/units", tags=["units"])


async def _with_progress(
    store: RecordStore, unit: Unit, user_id: int, settings: Settings
) -> UnitWithProgress:
    documents = await store.list_documents(unit.id)
    notes = await store.list_notes(unit.id)
    entries = await store.list_study_plan(user_id, unit_id=unit.id)
    progress = unit_progress_from_plan(
        documents_count=len(documents),
        notes_count=len(notes),
        unit_entries=entries,
        today=local_today(settings.timezone),
    )
    return UnitWithProgress.build(unit, progress)


@router.get("", response_model=list[UnitWithProgress])
async def list_units(
    current_user: CurrentUser,
    store: Store,
    settings: AppSettings,
) -> list[UnitWithProgress]:
    """List units with document/note counts and progress."""
    units = await store.list_units(current_user.id)
    return [await _with_progress(store, unit, current_user.id, settings) for unit in units]


@router.post("", response_model=UnitRead, status_code=status.HTTP_201_CREATED)
async def create_unit(data: UnitCreate, current_user: CurrentUser, store: Store) -> UnitRead:
    """Create a new unit."""
    unit = await store.add(Unit(user_id=current_user.id, **data.model_dump()))
    return UnitRead.model_validate(unit)


@router.get("/{unit_id}", response_model=UnitWithProgress)
async def get_unit(
    unit_id: int,
    current_user: CurrentUser,
    store: Store,
    settings: AppSettings,
) -> UnitWithProgress:
    """Get one unit with its progress."""
    unit = await get_owned_or_404(store, Unit, unit_id, current_user.id)
    return await _with_progress(store, unit, current_user.id, settings)


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_unit(unit_id: int, current_user: CurrentUser, store: Store, blobs: Blobs) -> None:
    """
    Delete a unit with its documents, notes and summaries.

    Stored files go first so a storage failure leaves the records intact.
    Assignments and plan entries of the unit are kept, unlinked.
    """
    unit = await get_owned_or_404(store, Unit, unit_id, current_user.id)
    documents = await store.list_documents(unit.id)
    for document in documents:
        await blobs.delete(document.storage_location)
    await store.delete(Unit, unit.id)
    logger.info("Deleted unit %d (%d documents)", unit.id, len(documents))
