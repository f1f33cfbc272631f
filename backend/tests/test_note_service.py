"""
Notebox Backend — Note Service Unit Tests
==========================================

What:  Tests for NoteService validation and error translation.
How:   Uses mock DB sessions (no real database).

What we test:
    ✅ Malformed ids are rejected before touching the database
    ✅ Missing notes raise NotFoundError
    ✅ Missing/empty titles raise BadInputError and persist nothing
    ✅ createdAt == updatedAt on creation, updatedAt bumped on update
    ✅ Database failures surface as InternalError
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from notebox.exceptions import BadInputError, InternalError, NotFoundError
from notebox.models.note import Note
from notebox.services.note_service import NoteService, parse_note_id


def make_note(**overrides) -> Note:
    created = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    fields = {
        "id": uuid.uuid4(),
        "title": "Groceries",
        "text": "milk, eggs",
        "created_at": created,
        "updated_at": created,
    }
    fields.update(overrides)
    return Note(**fields)


class TestParseNoteId:

    def test_valid_uuid(self):
        note_id = uuid.uuid4()
        assert parse_note_id(str(note_id)) == note_id

    @pytest.mark.parametrize("raw", ["not-an-id", "", "1234", "65a0f1c2e4b0a1b2c3d4e5f6"])
    def test_malformed_ids_rejected(self, raw):
        with pytest.raises(BadInputError, match="invalid noteId"):
            parse_note_id(raw)


class TestNoteServiceGet:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_get_note_found(self, mock_db_session):
        note = make_note()
        mock_db_session.get.return_value = note

        result = await self.service.get_note(mock_db_session, str(note.id))

        assert result is note
        mock_db_session.get.assert_awaited_once_with(Note, note.id)

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError, match="Note not found"):
            await self.service.get_note(mock_db_session, str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_get_note_malformed_id_skips_database(self, mock_db_session):
        with pytest.raises(BadInputError):
            await self.service.get_note(mock_db_session, "not-an-id")
        mock_db_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_database_failure_is_internal_error(self, mock_db_session):
        mock_db_session.get.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(InternalError) as exc_info:
            await self.service.get_note(mock_db_session, str(uuid.uuid4()))
        assert exc_info.value.message == "An unknown error occurred"


class TestNoteServiceCreate:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_sets_equal_timestamps(self, mock_db_session):
        note = await self.service.create_note(mock_db_session, title="A", text="B")

        assert note.title == "A"
        assert note.text == "B"
        assert note.created_at == note.updated_at
        mock_db_session.add.assert_called_once_with(note)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_text_is_optional(self, mock_db_session):
        note = await self.service.create_note(mock_db_session, title="Only a title")
        assert note.text is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", [None, ""])
    async def test_missing_title_persists_nothing(self, mock_db_session, title):
        with pytest.raises(BadInputError, match="Note must have a title"):
            await self.service.create_note(mock_db_session, title=title, text="body")
        mock_db_session.add.assert_not_called()


class TestNoteServiceUpdate:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_update_replaces_fields_and_bumps_updated_at(self, mock_db_session):
        note = make_note()
        created = note.created_at
        mock_db_session.get.return_value = note

        result = await self.service.update_note(
            mock_db_session, str(note.id), title="New title", text=None
        )

        assert result.title == "New title"
        assert result.text is None
        assert result.created_at == created
        assert result.updated_at > created
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_malformed_id_reported_before_missing_title(self, mock_db_session):
        with pytest.raises(BadInputError, match="invalid noteId"):
            await self.service.update_note(mock_db_session, "nope", title=None)

    @pytest.mark.asyncio
    async def test_missing_title_leaves_note_untouched(self, mock_db_session):
        note = make_note()
        mock_db_session.get.return_value = note

        with pytest.raises(BadInputError, match="Note must have a title"):
            await self.service.update_note(mock_db_session, str(note.id), title="")
        assert note.title == "Groceries"
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_missing_note(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await self.service.update_note(mock_db_session, str(uuid.uuid4()), title="x")


class TestNoteServiceListAndDelete:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_list_notes(self, mock_db_session):
        notes = [make_note(created_at=datetime.now(timezone.utc) + timedelta(seconds=i)) for i in range(3)]
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = notes
        mock_db_session.execute = AsyncMock(return_value=mock_result)

        result = await self.service.list_notes(mock_db_session)

        assert result == notes

    @pytest.mark.asyncio
    async def test_delete_note(self, mock_db_session):
        note = make_note()
        mock_db_session.get.return_value = note

        await self.service.delete_note(mock_db_session, str(note.id))

        mock_db_session.delete.assert_awaited_once_with(note)

    @pytest.mark.asyncio
    async def test_delete_missing_note(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await self.service.delete_note(mock_db_session, str(uuid.uuid4()))
        mock_db_session.delete.assert_not_awaited()
