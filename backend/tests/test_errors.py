"""
Notebox Backend — Error Translation Tests
==========================================

What:  Every failure reaches the client as {"error": "<message>"} with the
       right status, and nothing internal leaks.
"""

import logging

import pytest

from notebox.exceptions import (
    GENERIC_ERROR_MESSAGE,
    BadInputError,
    ConflictError,
    InternalError,
    NotFoundError,
    NoteboxError,
    UnauthorizedError,
)
from notebox.middleware.logging import level_for_status


class TestErrorTaxonomy:

    @pytest.mark.parametrize(
        "error_class,status",
        [
            (BadInputError, 400),
            (UnauthorizedError, 401),
            (NotFoundError, 404),
            (ConflictError, 409),
            (InternalError, 500),
        ],
    )
    def test_status_codes(self, error_class, status):
        assert error_class("boom").status_code == status
        assert issubclass(error_class, NoteboxError)

    def test_internal_error_default_message(self):
        assert InternalError().message == GENERIC_ERROR_MESSAGE

    def test_context_is_kept_separate_from_message(self):
        error = NotFoundError("Note not found", context={"note_id": "abc"})
        assert str(error) == "Note not found"
        assert error.context == {"note_id": "abc"}


class TestErrorResponses:

    @pytest.mark.asyncio
    async def test_unknown_endpoint(self, test_client):
        response = await test_client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "Endpoint not found"}

    @pytest.mark.asyncio
    async def test_unknown_endpoint_with_session(self, logged_in_client):
        response = await logged_in_client.post("/nowhere", json={})

        assert response.status_code == 404
        assert response.json() == {"error": "Endpoint not found"}

    @pytest.mark.asyncio
    async def test_malformed_json(self, logged_in_client):
        response = await logged_in_client.post(
            "/api/notes",
            content=b'{"title": ',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert set(response.json()) == {"error"}

    @pytest.mark.asyncio
    async def test_ill_typed_field(self, logged_in_client):
        response = await logged_in_client.post("/api/notes", json={"title": 123})

        assert response.status_code == 400
        assert response.json()["error"].startswith("title:")

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_generic_500(self, app, test_client):
        @app.get("/explode")
        async def explode():
            raise RuntimeError("connection string postgres://secret@db")

        response = await test_client.get("/explode")

        assert response.status_code == 500
        assert response.json() == {"error": "An unknown error occurred"}
        assert "secret" not in response.text

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


class TestAccessLog:

    @pytest.mark.parametrize("status,level", [(200, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)])
    def test_level_follows_status_class(self, status, level):
        assert level_for_status(status) == level

    @pytest.mark.asyncio
    async def test_authenticated_request_logs_user(self, logged_in_client, caplog):
        with caplog.at_level(logging.INFO, logger="notebox.access"):
            await logged_in_client.get("/api/notes")

        lines = [r.getMessage() for r in caplog.records if r.name == "notebox.access"]
        assert any(line.startswith("GET /api/notes 200") and "user=-" not in line for line in lines)
