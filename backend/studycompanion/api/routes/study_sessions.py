"""Study session tracking routes."""

from fastapi import APIRouter, Query

from studycompanion.api.deps import AI, CurrentUser, Store
from studycompanion.schemas.study_sessions import (
    StudySessionCreate,
    StudySessionRead,
    StudySessionRecorded,
)

router = APIRouter(prefix="/study-sessions", tags=["study-sessions"])


@router.get("", response_model=list[StudySessionRead])
async def list_sessions(
    current_user: CurrentUser,
    store: Store,
    limit: int = Query(30, ge=1, le=365),
) -> list[StudySessionRead]:
    """Recent study days, newest first."""
    sessions = await store.list_study_sessions(current_user.id, limit)
    return [StudySessionRead.model_validate(s) for s in sessions]


@router.post("", response_model=StudySessionRecorded)
async def record_session(
    data: StudySessionCreate,
    current_user: CurrentUser,
    store: Store,
    ai: AI,
) -> StudySessionRecorded:
    """
    Add study time to a day.

    Repeated posts for the same date accumulate. Once the day's total
    passes the break threshold a break suggestion is attached.
    """
    session = await store.record_study_session(
        current_user.id,
        data.date,
        minutes_studied=data.minutes_studied,
        topics_completed=data.topics_completed,
    )
    suggestion = ai.check_for_break_suggestion(session.minutes_studied, data.date.strftime("%A"))
    return StudySessionRecorded(
        **StudySessionRead.model_validate(session).model_dump(),
        break_suggestion=suggestion,
    )
