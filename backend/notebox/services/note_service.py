"""
Notebox Backend — Note Service
===============================

What:  Business logic for the notes CRUD endpoints.
How:   Each method validates its input, performs one database operation
       through the request's AsyncSession and returns ORM objects; the route
       layer serializes them.
Who:   Called by notebox/routes/notes.py.

Validation rules:
    - note ids must parse as UUIDs      → BadInputError("invalid noteId")
    - the note must exist               → NotFoundError("Note not found")
    - title is required and non-empty   → BadInputError("Note must have a title")

Error Handling Strategy:
    Our own exceptions propagate unchanged. SQLAlchemy failures are logged
    and wrapped in InternalError, whose message never reveals query details.

NoteService is stateless; the database session is passed to every call.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import asc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notebox.exceptions import BadInputError, InternalError, NotFoundError
from notebox.models.note import Note, utcnow

logger = logging.getLogger(__name__)


def parse_note_id(raw_id: str) -> uuid.UUID:
    """Converts a path parameter to a UUID or raises BadInputError."""
    try:
        return uuid.UUID(str(raw_id))
    except (ValueError, TypeError, AttributeError):
        raise BadInputError("invalid noteId", context={"note_id": raw_id})


def _require_title(title: Optional[str]) -> str:
    if not title:
        raise BadInputError("Note must have a title")
    return title


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes():  every note, oldest first
        - get_note():    one note by id
        - create_note(): insert with equal created/updated timestamps
        - update_note(): replace title and text, bump updated_at
        - delete_note(): remove by id
    """

    async def list_notes(self, db: AsyncSession) -> List[Note]:
        try:
            result = await db.execute(select(Note).order_by(asc(Note.created_at)))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})

    async def get_note(self, db: AsyncSession, note_id: str) -> Note:
        """
        Retrieve a single note by ID.

        Raises:
            BadInputError: `note_id` is not a UUID (→ 400)
            NotFoundError: no note with that id (→ 404)
            InternalError: query execution failed (→ 500)
        """
        parsed_id = parse_note_id(note_id)
        try:
            note = await db.get(Note, parsed_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", parsed_id, str(e))
            raise InternalError(context={"note_id": str(parsed_id)})

        if note is None:
            raise NotFoundError("Note not found", context={"note_id": str(parsed_id)})
        return note

    async def create_note(
        self,
        db: AsyncSession,
        title: Optional[str],
        text: Optional[str] = None,
    ) -> Note:
        """
        Insert a new note.

        created_at and updated_at receive the same instant, so a freshly
        created note always satisfies createdAt == updatedAt.
        """
        title = _require_title(title)
        now = utcnow()
        note = Note(title=title, text=text, created_at=now, updated_at=now)
        try:
            db.add(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})

        logger.info("Note created: %s", note.id)
        return note

    async def update_note(
        self,
        db: AsyncSession,
        note_id: str,
        title: Optional[str],
        text: Optional[str] = None,
    ) -> Note:
        """
        Replace a note's title and text.

        The id is validated before the title so a malformed id reports
        "invalid noteId" regardless of the body. An absent text clears the
        note body.
        """
        note = await self.get_note(db, note_id)
        title = _require_title(title)

        note.title = title
        note.text = text
        note.updated_at = utcnow()
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note.id, str(e), exc_info=True)
            raise InternalError(context={"note_id": str(note.id)})

        logger.info("Note updated: %s", note.id)
        return note

    async def delete_note(self, db: AsyncSession, note_id: str) -> None:
        note = await self.get_note(db, note_id)
        try:
            await db.delete(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note.id, str(e), exc_info=True)
            raise InternalError(context={"note_id": str(note.id)})

        logger.info("Note deleted: %s", note.id)


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
