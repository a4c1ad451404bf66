"""Assignment CRUD routes."""

from fastapi import APIRouter, status

from studycompanion.api.deps import CurrentUser, Store, get_owned_or_404
from studycompanion.db.models import Assignment, Unit
from studycompanion.schemas.assignments import (
    AssignmentCreate,
    AssignmentRead,
    AssignmentUpdate,
    AssignmentWithUrgency,
)
from studycompanion.services.progress import annotate_assignments
from studycompanion.store import RecordStore, utcnow

router = APIRouter(prefix="/assignments", tags=["assignments"])


async def _check_unit(store: RecordStore, unit_id: int | None, user_id: int) -> None:
    if unit_id is not None:
        await get_owned_or_404(store, Unit, unit_id, user_id)


@router.get("", response_model=list[AssignmentWithUrgency])
async def list_assignments(current_user: CurrentUser, store: Store) -> list[AssignmentWithUrgency]:
    """
    List assignments for the current user.

    Ordered by deadline; each carries daysUntilDue and urgency
    (high: 2 days or less, medium: a week or less, low: later).
    Overdue assignments stay in the list with negative daysUntilDue.
    """
    assignments = await store.list_assignments(current_user.id)
    return [AssignmentWithUrgency.from_view(v) for v in annotate_assignments(assignments, utcnow())]


@router.post("", response_model=AssignmentRead, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    data: AssignmentCreate,
    current_user: CurrentUser,
    store: Store,
) -> AssignmentRead:
    """Create a new assignment."""
    await _check_unit(store, data.unit_id, current_user.id)
    assignment = await store.add(Assignment(user_id=current_user.id, **data.model_dump()))
    return AssignmentRead.model_validate(assignment)


@router.get("/{assignment_id}", response_model=AssignmentWithUrgency)
async def get_assignment(
    assignment_id: int,
    current_user: CurrentUser,
    store: Store,
) -> AssignmentWithUrgency:
    """Get a specific assignment by ID."""
    assignment = await get_owned_or_404(store, Assignment, assignment_id, current_user.id)
    [view] = annotate_assignments([assignment], utcnow())
    return AssignmentWithUrgency.from_view(view)


@router.patch("/{assignment_id}", response_model=AssignmentRead)
async def update_assignment(
    assignment_id: int,
    data: AssignmentUpdate,
    current_user: CurrentUser,
    store: Store,
) -> AssignmentRead:
    """Update an assignment."""
    assignment = await get_owned_or_404(store, Assignment, assignment_id, current_user.id)
    changes = data.model_dump(exclude_unset=True)
    await _check_unit(store, changes.get("unit_id"), current_user.id)
    assignment = await store.update(Assignment, assignment.id, **changes)
    return AssignmentRead.model_validate(assignment)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment(assignment_id: int, current_user: CurrentUser, store: Store) -> None:
    """Delete an assignment."""
    assignment = await get_owned_or_404(store, Assignment, assignment_id, current_user.id)
    await store.delete(Assignment, assignment.id)
