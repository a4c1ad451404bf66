"""Note CRUD routes."""

from fastapi import APIRouter, status

from studycompanion.api.deps import CurrentUser, Store, get_owned_or_404
from studycompanion.db.models import Document, Note, Unit
from studycompanion.exceptions import ValidationError
from studycompanion.schemas.notes import NoteCreate, NoteRead, NoteUpdate

router = APIRouter(tags=["notes"])


@router.get("/units/{unit_id}/notes", response_model=list[NoteRead])
async def list_notes(unit_id: int, current_user: CurrentUser, store: Store) -> list[NoteRead]:
    """List the notes of a unit."""
    unit = await get_owned_or_404(store, Unit, unit_id, current_user.id)
    return [NoteRead.model_validate(n) for n in await store.list_notes(unit.id)]


@router.post("/units/{unit_id}/notes", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    unit_id: int,
    data: NoteCreate,
    current_user: CurrentUser,
    store: Store,
) -> NoteRead:
    """Create a note in a unit, optionally linked to one of its documents."""
    unit = await get_owned_or_404(store, Unit, unit_id, current_user.id)
    if data.document_id is not None:
        document = await get_owned_or_404(store, Document, data.document_id, current_user.id)
        if document.unit_id != unit.id:
            raise ValidationError("Document does not belong to this unit")

    note = await store.add(
        Note(
            user_id=current_user.id,
            unit_id=unit.id,
            document_id=data.document_id,
            content=data.content,
        )
    )
    return NoteRead.model_validate(note)


@router.patch("/notes/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: int,
    data: NoteUpdate,
    current_user: CurrentUser,
    store: Store,
) -> NoteRead:
    """Replace a note's content."""
    note = await get_owned_or_404(store, Note, note_id, current_user.id)
    note = await store.update(Note, note.id, content=data.content)
    return NoteRead.model_validate(note)


@router.delete("/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(note_id: int, current_user: CurrentUser, store: Store) -> None:
    """Delete a note."""
    note = await get_owned_or_404(store, Note, note_id, current_user.id)
    await store.delete(Note, note.id)
