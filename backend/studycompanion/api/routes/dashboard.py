"""Dashboard route: the home screen in one request."""

from fastapi import APIRouter

from studycompanion.api.deps import AppSettings, CurrentUser, Store
from studycompanion.schemas.dashboard import DashboardRead
from studycompanion.services.progress import build_dashboard, local_today
from studycompanion.store import utcnow

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardRead)
async def get_dashboard(current_user: CurrentUser, store: Store, settings: AppSettings) -> DashboardRead:
    """Today's progress, study streak, next session and upcoming assignments."""
    now = utcnow()
    today = local_today(settings.timezone, now)
    dashboard = build_dashboard(
        user=current_user,
        plan_entries=await store.list_study_plan(current_user.id, today),
        sessions=await store.list_study_sessions(current_user.id, settings.streak_window_days),
        assignments=await store.list_assignments(current_user.id),
        now=now,
        today=today,
        streak_window=settings.streak_window_days,
    )
    return DashboardRead.build(dashboard)
