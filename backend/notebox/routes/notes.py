"""
Notebox Backend — Notes Route Handlers
=======================================

What:  CRUD endpoints under /api/notes.
How:   Every route sits behind the auth guard (router-level dependency),
       delegates to NoteService and lets errors reach the global translator.
Who:   Called by the client API layer (notebox.client).

Endpoints:
    GET    /api/notes            → 200 list of notes
    GET    /api/notes/{noteId}   → 200 note | 400 | 404
    POST   /api/notes/           → 201 note | 400
    PATCH  /api/notes/{noteId}   → 200 note | 400 | 404
    DELETE /api/notes/{noteId}   → 204      | 400 | 404
    All of them → 401 without a valid session.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notebox.database import get_db_session
from notebox.middleware.auth import require_auth
from notebox.schemas.common import ErrorResponse
from notebox.schemas.note import NoteInput, NoteResponse
from notebox.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/notes",
    tags=["Notes"],
    dependencies=[Depends(require_auth)],
    responses={
        401: {"description": "No valid session", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
)

_ID_ERRORS = {
    400: {"description": "Malformed note id or missing title", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
}


@router.get("", response_model=List[NoteResponse], summary="List all notes")
@router.get("/", response_model=List[NoteResponse], include_in_schema=False)
async def get_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteResponse]:
    notes = await note_service.list_notes(db)
    return [NoteResponse.model_validate(note) for note in notes]


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_ID_ERRORS,
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Args:
        note_id: taken as a plain string so a malformed id is answered with
                 400 "invalid noteId" by NoteService instead of a 422.
    """
    note = await note_service.get_note(db, note_id)
    return NoteResponse.model_validate(note)


@router.post(
    "/",
    status_code=201,
    response_model=NoteResponse,
    responses={400: {"description": "Missing title", "model": ErrorResponse}},
    summary="Create a note",
)
@router.post("", status_code=201, response_model=NoteResponse, include_in_schema=False)
async def create_note(
    body: Optional[NoteInput] = None,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    body = body or NoteInput()
    note = await note_service.create_note(db, title=body.title, text=body.text)
    return NoteResponse.model_validate(note)


@router.patch(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_ID_ERRORS,
    summary="Update a note's title and text",
)
async def update_note(
    note_id: str,
    body: Optional[NoteInput] = None,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    body = body or NoteInput()
    note = await note_service.update_note(db, note_id, title=body.title, text=body.text)
    return NoteResponse.model_validate(note)


@router.delete(
    "/{note_id}",
    status_code=204,
    responses=_ID_ERRORS,
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db, note_id)
    return Response(status_code=204)
