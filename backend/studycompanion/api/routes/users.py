"""Routes for the configured user."""

from fastapi import APIRouter

from studycompanion.api.deps import CurrentUser, Store
from studycompanion.db.models import User
from studycompanion.schemas.user import PaceUpdate, UserRead

router = APIRouter(prefix="/user", tags=["user"])


@router.get("", response_model=UserRead)
async def get_user(current_user: CurrentUser) -> UserRead:
    """Get the user this deployment serves."""
    return UserRead.model_validate(current_user)


@router.patch("/pace", response_model=UserRead)
async def update_pace(data: PaceUpdate, current_user: CurrentUser, store: Store) -> UserRead:
    """Set the study pace (1 = relaxed, 80 = intensive)."""
    user = await store.update(User, current_user.id, pace=data.pace)
    return UserRead.model_validate(user)
