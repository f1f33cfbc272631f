"""
Notebox Client — API Functions
===============================

What:  Thin async wrappers around the Notebox HTTP API.
How:   Every call goes through NotesApi.fetch_data(), which returns the
       response on 2xx and otherwise raises an HttpError carrying the
       server's `error` message (httpx does not raise on non-2xx by
       itself). Each API method then decodes the JSON into a typed model.
Who:   Front-ends, scripts and the test suite.

Session handling:
    The session cookie set by signup/login lives in the httpx client's
    cookie jar and is sent automatically on later calls.

Example usage:
    async with NotesApi.connect("http://localhost:5000") as api:
        await api.login(LoginCredentials(username="a", password="p"))
        for note in await api.fetch_notes():
            print(note.title)
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, List, Optional

import httpx

from notebox.client.errors import ConflictError, HttpError, UnauthorizedError
from notebox.client.models import LoginCredentials, Note, NoteInput, SignUpCredentials, User

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """The `error` field of a JSON error body, falling back to the raw text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return response.text or response.reason_phrase or f"HTTP {response.status_code}"


class NotesApi:
    """Client for the Notebox API, bound to one httpx.AsyncClient."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    @classmethod
    @asynccontextmanager
    async def connect(
        cls, base_url: str, timeout: float = 10.0
    ) -> AsyncGenerator["NotesApi", None]:
        """Opens an httpx client for `base_url` and closes it on exit."""
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout) as http:
            yield cls(http)

    async def fetch_data(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Issue a request and fail loudly on non-2xx responses.

        Raises:
            UnauthorizedError: 401
            ConflictError:     409
            HttpError:         any other non-2xx status
        """
        response = await self._http.request(method, url, **kwargs)
        if response.is_success:
            return response

        message = _error_message(response)
        logger.debug("%s %s failed with %d: %s", method, url, response.status_code, message)
        if response.status_code == 401:
            raise UnauthorizedError(message, response.status_code)
        if response.status_code == 409:
            raise ConflictError(message, response.status_code)
        raise HttpError(
            f"Request failed with status: {response.status_code} message: {message}",
            response.status_code,
        )

    # ── Users ─────────────────────────────────────────────────────────────

    async def get_logged_in_user(self) -> Optional[User]:
        response = await self.fetch_data("GET", "/api/users/")
        data = response.json()
        return User.model_validate(data) if data is not None else None

    async def sign_up(self, credentials: SignUpCredentials) -> User:
        response = await self.fetch_data(
            "POST", "/api/users/signup", json=credentials.model_dump()
        )
        return User.model_validate(response.json())

    async def login(self, credentials: LoginCredentials) -> User:
        response = await self.fetch_data(
            "POST", "/api/users/login", json=credentials.model_dump()
        )
        return User.model_validate(response.json())

    async def logout(self) -> None:
        await self.fetch_data("POST", "/api/users/logout")

    # ── Notes ─────────────────────────────────────────────────────────────

    async def fetch_notes(self) -> List[Note]:
        response = await self.fetch_data("GET", "/api/notes")
        return [Note.model_validate(item) for item in response.json()]

    async def get_note(self, note_id: str) -> Note:
        response = await self.fetch_data("GET", f"/api/notes/{note_id}")
        return Note.model_validate(response.json())

    async def create_note(self, note: NoteInput) -> Note:
        response = await self.fetch_data("POST", "/api/notes/", json=note.model_dump())
        return Note.model_validate(response.json())

    async def update_note(self, note_id: str, note: NoteInput) -> Note:
        response = await self.fetch_data(
            "PATCH", f"/api/notes/{note_id}", json=note.model_dump()
        )
        return Note.model_validate(response.json())

    async def delete_note(self, note_id: str) -> None:
        await self.fetch_data("DELETE", f"/api/notes/{note_id}")
