"""Async HTTP client for the Notebox API."""

from notebox.client.api import NotesApi
from notebox.client.errors import ConflictError, HttpError, UnauthorizedError
from notebox.client.models import LoginCredentials, Note, NoteInput, SignUpCredentials, User

__all__ = [
    "ConflictError",
    "HttpError",
    "LoginCredentials",
    "Note",
    "NoteInput",
    "NotesApi",
    "SignUpCredentials",
    "UnauthorizedError",
    "User",
]
