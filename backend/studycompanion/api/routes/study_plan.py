"""Daily study plan routes."""

import datetime as dt
import logging

from fastapi import APIRouter, Query, status

from studycompanion.api.deps import AI, AppSettings, CurrentUser, Store, get_owned_or_404
from studycompanion.db.models import Document, StudyPlanEntry, Unit
from studycompanion.schemas.ai import StudyPlanGenerateRequest, StudyPlanResult
from studycompanion.schemas.study_plan import DailyPlanRead, StudyPlanEntryCreate, StudyPlanEntryRead
from studycompanion.services.ai_service import Deadline
from studycompanion.services.progress import as_utc, daily_plan, local_today
from studycompanion.store import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/study-plan", tags=["study-plan"])


@router.get("", response_model=DailyPlanRead)
async def get_daily_plan(
    current_user: CurrentUser,
    store: Store,
    settings: AppSettings,
    day: dt.date | None = Query(None, alias="date"),
) -> DailyPlanRead:
    """
    One day of the plan, split into upcoming and completed entries.

    Query parameters:
    - date: YYYY-MM-DD (defaults to today)
    """
    day = day or local_today(settings.timezone)
    entries = await store.list_study_plan(current_user.id, day)
    plan = daily_plan(entries, day)
    return DailyPlanRead(
        date=plan.date,
        upcoming=[StudyPlanEntryRead.model_validate(e) for e in plan.upcoming],
        completed=[StudyPlanEntryRead.model_validate(e) for e in plan.completed],
        completed_count=plan.completed_count,
        total_count=plan.total_count,
        percentage=plan.percentage,
        planned_minutes=plan.planned_minutes,
    )


@router.post("", response_model=StudyPlanEntryRead, status_code=status.HTTP_201_CREATED)
async def create_entry(
    data: StudyPlanEntryCreate,
    current_user: CurrentUser,
    store: Store,
) -> StudyPlanEntryRead:
    """Schedule a study block."""
    if data.unit_id is not None:
        await get_owned_or_404(store, Unit, data.unit_id, current_user.id)
    if data.document_id is not None:
        await get_owned_or_404(store, Document, data.document_id, current_user.id)

    entry = await store.add(StudyPlanEntry(user_id=current_user.id, **data.model_dump()))
    return StudyPlanEntryRead.model_validate(entry)


@router.patch("/{entry_id}/complete", response_model=StudyPlanEntryRead)
async def complete_entry(entry_id: int, current_user: CurrentUser, store: Store) -> StudyPlanEntryRead:
    """Mark a study block as done."""
    entry = await get_owned_or_404(store, StudyPlanEntry, entry_id, current_user.id)
    entry = await store.update(StudyPlanEntry, entry.id, completed=True)
    return StudyPlanEntryRead.model_validate(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(entry_id: int, current_user: CurrentUser, store: Store) -> None:
    """Remove a study block."""
    entry = await get_owned_or_404(store, StudyPlanEntry, entry_id, current_user.id)
    await store.delete(StudyPlanEntry, entry.id)


@router.post("/generate", response_model=StudyPlanResult)
async def generate_plan(
    data: StudyPlanGenerateRequest,
    current_user: CurrentUser,
    store: Store,
    ai: AI,
) -> StudyPlanResult:
    """
    Draft a weekly schedule from the user's units, open deadlines and pace.

    The draft is returned for review; nothing is added to the plan.
    """
    units = await store.list_units(current_user.id)
    if data.unit_ids is not None:
        wanted = set(data.unit_ids)
        units = [u for u in units if u.id in wanted]
    unit_names = {u.id: u.name for u in units}

    now = utcnow()
    deadlines = [
        Deadline(
            subject=unit_names.get(a.unit_id, a.title),
            date=as_utc(a.deadline).date(),
            type=a.type,
        )
        for a in await store.list_assignments(current_user.id)
        if not a.completed
        and as_utc(a.deadline) > now
        and (data.unit_ids is None or a.unit_id in unit_names)
    ]

    logger.info(
        "Generating study plan for %d units and %d deadlines", len(unit_names), len(deadlines)
    )
    return await ai.generate_study_plan(
        subjects=list(unit_names.values()),
        deadlines=deadlines,
        pace=current_user.pace,
        available_hours=data.available_hours,
    )
