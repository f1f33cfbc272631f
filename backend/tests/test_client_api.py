"""
Notebox Client Tests
=====================

What:  NotesApi against the real app, plus fetch_data error mapping.
How:   End-to-end tests hand the ASGI-backed test_client to NotesApi;
       error-mapping tests use httpx.MockTransport with canned responses.
"""

import httpx
import pytest

from notebox.client import (
    ConflictError,
    HttpError,
    LoginCredentials,
    NoteInput,
    NotesApi,
    SignUpCredentials,
    UnauthorizedError,
)


def mock_api(status_code: int, **response_kwargs) -> NotesApi:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, **response_kwargs)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api")
    return NotesApi(http)


class TestFetchData:

    @pytest.mark.asyncio
    async def test_401_raises_unauthorized(self):
        api = mock_api(401, json={"error": "User not authenticated"})

        with pytest.raises(UnauthorizedError) as exc_info:
            await api.fetch_notes()

        assert exc_info.value.message == "User not authenticated"
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_409_raises_conflict(self):
        api = mock_api(409, json={"error": "Username already taken."})

        with pytest.raises(ConflictError, match="Username already taken."):
            await api.sign_up(SignUpCredentials(username="a", email="a@x.io", password="p"))

    @pytest.mark.asyncio
    async def test_other_status_includes_status_and_message(self):
        api = mock_api(404, json={"error": "Note not found"})

        with pytest.raises(HttpError) as exc_info:
            await api.get_note("abc")

        assert not isinstance(exc_info.value, (UnauthorizedError, ConflictError))
        assert str(exc_info.value) == "Request failed with status: 404 message: Note not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        api = mock_api(502, text="Bad Gateway from proxy")

        with pytest.raises(HttpError) as exc_info:
            await api.fetch_notes()

        assert "Bad Gateway from proxy" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_delete_failure_surfaces(self):
        api = mock_api(500, json={"error": "An unknown error occurred"})

        with pytest.raises(HttpError, match="An unknown error occurred"):
            await api.delete_note("abc")

    @pytest.mark.asyncio
    async def test_null_user(self):
        api = mock_api(200, content=b"null", headers={"Content-Type": "application/json"})
        assert await api.get_logged_in_user() is None


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_full_session(self, test_client):
        api = NotesApi(test_client)

        with pytest.raises(UnauthorizedError):
            await api.get_logged_in_user()

        user = await api.sign_up(
            SignUpCredentials(username="carol", email="carol@example.com", password="pw")
        )
        assert user.username == "carol"
        assert (await api.get_logged_in_user()).id == user.id

        note = await api.create_note(NoteInput(title="Plan", text="Write tests"))
        assert note.created_at == note.updated_at

        updated = await api.update_note(note.id, NoteInput(title="Plan v2"))
        assert updated.title == "Plan v2"
        assert updated.text is None
        assert updated.updated_at >= updated.created_at

        assert [n.id for n in await api.fetch_notes()] == [note.id]

        await api.delete_note(note.id)
        assert await api.fetch_notes() == []

        await api.logout()
        with pytest.raises(UnauthorizedError):
            await api.fetch_notes()

        again = await api.login(LoginCredentials(username="carol", password="pw"))
        assert again.id == user.id

    @pytest.mark.asyncio
    async def test_duplicate_signup_raises_conflict(self, logged_in_client, test_user):
        api = NotesApi(logged_in_client)

        with pytest.raises(ConflictError) as exc_info:
            await api.sign_up(SignUpCredentials(**test_user))

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_bad_credentials(self, logged_in_client, test_user):
        api = NotesApi(logged_in_client)
        await api.logout()

        with pytest.raises(UnauthorizedError, match="Invalid credentials"):
            await api.login(LoginCredentials(username=test_user["username"], password="nope"))
