"""
NoteKeeper Backend: Notes Route Handlers
========================================

What:  CRUD endpoints for the authenticated user's notes.
How:   Resolves the caller's Identity, passes it to NoteService, and maps
       the service result to a status code.

Status Mapping:
    create/update/delete returned False → 400
    get returned None                   → 404
    anything else                       → 200 with payload

    A note owned by another user yields the same 400/404 as a note that
    does not exist.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.database import get_db_session
from notekeeper.exceptions import NotFoundError, ValidationError
from notekeeper.identity import Identity, get_current_identity
from notekeeper.schemas.common import ErrorResponse, MessageResponse
from notekeeper.schemas.note import NoteCreate, NoteDetail, NoteListItem, NoteUpdate
from notekeeper.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Notes"],
    responses={401: {"description": "Missing or invalid bearer token", "model": ErrorResponse}},
)


@router.get(
    "/notes",
    response_model=List[NoteListItem],
    summary="List the caller's notes",
)
async def list_notes(
    response: Response,
    owner: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteListItem]:
    """Summaries (id, title, created_at) of every note the caller owns."""
    notes = await note_service.list_notes(db, owner)
    # Per-user data; never let a shared cache hold it
    response.headers["Cache-Control"] = "private, no-store"
    return notes


@router.post(
    "/notes",
    response_model=MessageResponse,
    responses={400: {"description": "Note could not be created", "model": ErrorResponse}},
    summary="Create a note",
)
async def create_note(
    request: NoteCreate,
    owner: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    if await note_service.create_note(db, owner, request.title, request.content):
        return MessageResponse(message="Note created successfully.")
    raise ValidationError(message="Note could not be created.")


@router.get(
    "/notes/{note_id}",
    response_model=NoteDetail,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: int,
    response: Response,
    owner: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> NoteDetail:
    detail = await note_service.get_note(db, owner, note_id)
    if detail is None:
        raise NotFoundError(resource="note", resource_id=str(note_id))
    response.headers["Cache-Control"] = "private, no-store"
    return detail


@router.put(
    "/notes",
    response_model=MessageResponse,
    responses={400: {"description": "Note could not be updated", "model": ErrorResponse}},
    summary="Update a note",
)
async def update_note(
    request: NoteUpdate,
    owner: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """
    Overwrite title and content of the note named by `request.id`.

    The id comes from the client, so the service re-checks that the
    caller owns it before writing.
    """
    if await note_service.update_note(db, owner, request.id, request.title, request.content):
        return MessageResponse(message="Note updated successfully.")
    raise ValidationError(message="Note could not be updated.")


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses={400: {"description": "Note could not be deleted", "model": ErrorResponse}},
    summary="Delete a note",
)
async def delete_note(
    note_id: int,
    owner: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    if await note_service.delete_note(db, owner, note_id):
        return MessageResponse(message=f"Note {note_id} was deleted successfully.")
    raise ValidationError(message=f"Note {note_id} could not be deleted.")
