"""
Derived, read-only views over stored records.

Everything here is a pure function of its arguments: callers pass the
records plus "now"/"today", nothing is written back. Four views feed the
API:

(a) unit progress   - topic counts and a percentage per unit
(b) assignment view - days until due and an urgency label
(c) daily plan      - one day's entries split into upcoming/completed
(d) study streak    - consecutive days with finished topics, ending today

``build_dashboard`` composes (b), (c) and (d) for the dashboard endpoint.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Literal
from zoneinfo import ZoneInfo

from studycompanion.db.models import Assignment, StudyPlanEntry, StudySession, User

Urgency = Literal["high", "medium", "low"]

ONE_DAY = timedelta(days=1)
MIN_TOTAL_TOPICS = 5
TOPICS_PER_DOCUMENT = 2
UPCOMING_ASSIGNMENTS_LIMIT = 3


# =============================================================================
# HELPERS
# =============================================================================


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (Python's round() is banker's rounding)."""
    return math.floor(value + 0.5)


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC so comparisons never mix naive and aware values."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def calendar_day(value: date | datetime) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def local_today(tz_name: str, now: datetime | None = None) -> date:
    """The current calendar date in ``tz_name``."""
    now = as_utc(now or datetime.now(timezone.utc))
    return now.astimezone(ZoneInfo(tz_name)).date()


# =============================================================================
# (a) UNIT PROGRESS
# =============================================================================


@dataclass(frozen=True)
class UnitProgress:
    documents_count: int
    notes_count: int
    total_topics: int
    completed_topics: int
    progress_percentage: int
    last_studied: str


def last_studied_label(documents_count: int, last_studied_on: date | None, today: date) -> str:
    if documents_count == 0:
        return "Not started"
    if last_studied_on is None:
        return "Not studied yet"
    days_ago = (today - last_studied_on).days
    if days_ago <= 0:
        return "Today"
    if days_ago == 1:
        return "Yesterday"
    return f"{days_ago} days ago"


def unit_progress(
    documents_count: int,
    notes_count: int,
    completed_topics: int,
    last_studied_on: date | None,
    today: date,
) -> UnitProgress:
    """
    Progress of one unit.

    Each document counts as two topics, with a floor of five so an empty
    unit still has a denominator. ``completed_topics`` is the number of
    finished plan entries for the unit, clamped into ``[0, total_topics]``.
    """
    total_topics = max(documents_count * TOPICS_PER_DOCUMENT, MIN_TOTAL_TOPICS)
    completed = min(max(completed_topics, 0), total_topics)
    return UnitProgress(
        documents_count=documents_count,
        notes_count=notes_count,
        total_topics=total_topics,
        completed_topics=completed,
        progress_percentage=percentage(completed, total_topics),
        last_studied=last_studied_label(documents_count, last_studied_on, today),
    )


def unit_progress_from_plan(
    documents_count: int,
    notes_count: int,
    unit_entries: Iterable[StudyPlanEntry],
    today: date,
) -> UnitProgress:
    """``unit_progress`` fed from the unit's study plan entries."""
    finished = [calendar_day(e.scheduled_date) for e in unit_entries if e.completed]
    return unit_progress(
        documents_count=documents_count,
        notes_count=notes_count,
        completed_topics=len(finished),
        last_studied_on=max(finished) if finished else None,
        today=today,
    )


# =============================================================================
# (b) ASSIGNMENT URGENCY
# =============================================================================


@dataclass(frozen=True)
class AssignmentView:
    assignment: Assignment
    days_until_due: int
    urgency: Urgency


def days_until_due(deadline: datetime, now: datetime) -> int:
    """Whole days left, rounded up; negative once overdue."""
    return math.ceil((as_utc(deadline) - as_utc(now)) / ONE_DAY)


def urgency_for(days: int) -> Urgency:
    if days <= 2:
        return "high"
    if days <= 7:
        return "medium"
    return "low"


def annotate_assignments(assignments: Iterable[Assignment], now: datetime) -> list[AssignmentView]:
    """Annotate every assignment and sort by deadline (stable, so ties keep insertion order)."""
    views = []
    for assignment in assignments:
        days = days_until_due(assignment.deadline, now)
        views.append(AssignmentView(assignment=assignment, days_until_due=days, urgency=urgency_for(days)))
    views.sort(key=lambda v: as_utc(v.assignment.deadline))
    return views


# =============================================================================
# (c) DAILY STUDY PLAN
# =============================================================================


@dataclass(frozen=True)
class DailyPlan:
    date: date
    upcoming: list[StudyPlanEntry]
    completed: list[StudyPlanEntry]
    completed_count: int
    total_count: int
    percentage: int
    planned_minutes: int


def daily_plan(entries: Iterable[StudyPlanEntry], day: date) -> DailyPlan:
    """One day's entries, split by completion and ordered by ``HH:MM`` start time."""
    todays = [e for e in entries if calendar_day(e.scheduled_date) == day]
    todays.sort(key=lambda e: e.start_time)
    upcoming = [e for e in todays if not e.completed]
    completed = [e for e in todays if e.completed]
    return DailyPlan(
        date=day,
        upcoming=upcoming,
        completed=completed,
        completed_count=len(completed),
        total_count=len(todays),
        percentage=percentage(len(completed), len(todays)),
        planned_minutes=sum(e.estimated_minutes for e in todays),
    )


# =============================================================================
# (d) STUDY STREAK
# =============================================================================


def study_streak(sessions: Iterable[StudySession], today: date, window: int = 30) -> int:
    """
    Consecutive qualifying days ending today.

    A day qualifies when it has a session with at least one completed
    topic. The walk starts at today, so a day without a session today
    yields 0 even if yesterday qualified. At most ``window`` days are checked.
    """
    qualifying = {calendar_day(s.date) for s in sessions if s.topics_completed > 0}
    streak = 0
    for offset in range(window):
        if today - timedelta(days=offset) not in qualifying:
            break
        streak += 1
    return streak


# =============================================================================
# DASHBOARD
# =============================================================================


@dataclass(frozen=True)
class TodaysProgress:
    completed: int
    total: int
    percentage: int


@dataclass(frozen=True)
class Dashboard:
    user: User
    todays_progress: TodaysProgress
    study_streak: int
    next_session: StudyPlanEntry | None
    upcoming_assignments: list[AssignmentView]


def upcoming_assignments(
    assignments: Iterable[Assignment],
    now: datetime,
    limit: int = UPCOMING_ASSIGNMENTS_LIMIT,
) -> list[AssignmentView]:
    """The soonest incomplete assignments whose deadline is still ahead."""
    current = as_utc(now)
    views = annotate_assignments(
        (a for a in assignments if not a.completed and as_utc(a.deadline) > current),
        now,
    )
    return views[:limit]


def build_dashboard(
    user: User,
    plan_entries: Sequence[StudyPlanEntry],
    sessions: Sequence[StudySession],
    assignments: Sequence[Assignment],
    now: datetime,
    today: date,
    streak_window: int = 30,
) -> Dashboard:
    plan = daily_plan(plan_entries, today)
    return Dashboard(
        user=user,
        todays_progress=TodaysProgress(
            completed=plan.completed_count,
            total=plan.total_count,
            percentage=plan.percentage,
        ),
        study_streak=study_streak(sessions, today, streak_window),
        next_session=plan.upcoming[0] if plan.upcoming else None,
        upcoming_assignments=upcoming_assignments(assignments, now),
    )
