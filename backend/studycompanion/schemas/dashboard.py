"""Dashboard schemas."""

from studycompanion.schemas.assignments import AssignmentWithUrgency
from studycompanion.schemas.base import BaseSchema
from studycompanion.schemas.study_plan import StudyPlanEntryRead
from studycompanion.schemas.user import UserRead
from studycompanion.services.progress import Dashboard


class TodaysProgressRead(BaseSchema):
    completed: int
    total: int
    percentage: int


class DashboardRead(BaseSchema):
    """Everything the home screen shows, computed in one request."""

    user: UserRead
    todays_progress: TodaysProgressRead
    study_streak: int
    next_session: StudyPlanEntryRead | None = None
    upcoming_assignments: list[AssignmentWithUrgency]

    @classmethod
    def build(cls, dashboard: Dashboard) -> "DashboardRead":
        return cls(
            user=UserRead.model_validate(dashboard.user),
            todays_progress=TodaysProgressRead.model_validate(dashboard.todays_progress),
            study_streak=dashboard.study_streak,
            next_session=(
                StudyPlanEntryRead.model_validate(dashboard.next_session)
                if dashboard.next_session is not None
                else None
            ),
            upcoming_assignments=[
                AssignmentWithUrgency.from_view(view) for view in dashboard.upcoming_assignments
            ],
        )
