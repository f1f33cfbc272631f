"""
Notebox Backend — Application Error Taxonomy
=============================================

What:  The closed set of errors the API can answer with.
How:   Each class fixes its HTTP status in `status_code` and carries a
       client-safe `message` plus an optional `context` dict that is logged
       but never returned. The translator registered in main.py turns any
       NoteboxError into `{"error": message}` with that status.
Who:   Raised by services, the auth guard and the session layer.

Exception Hierarchy:
    NoteboxError (base, never raised directly)
    ├── BadInputError        → 400 Bad Request
    ├── UnauthorizedError    → 401 Unauthorized
    ├── NotFoundError        → 404 Not Found
    ├── ConflictError        → 409 Conflict
    └── InternalError        → 500 Internal Server Error

Anything that is not a NoteboxError is treated as unexpected: logged with
its traceback and answered with the generic InternalError message.
"""

from typing import Any, Dict, Optional

GENERIC_ERROR_MESSAGE = "An unknown error occurred"


class NoteboxError(Exception):
    """
    Base exception for all Notebox application errors.

    Attributes:
        status_code: HTTP status the translator responds with
        message:     User-facing error description (safe to return in API response)
        context:     Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    default_message: str = GENERIC_ERROR_MESSAGE

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.context = context or {}
        super().__init__(self.message)


class BadInputError(NoteboxError):
    """Missing or malformed request fields, or a malformed identifier."""

    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(NoteboxError):
    """
    No valid session, or credentials that do not match.

    Credential failures always use the same message so a caller cannot tell
    an unknown username from a wrong password.
    """

    status_code = 401
    default_message = "User not authenticated"


class NotFoundError(NoteboxError):
    """A referenced resource does not exist."""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(NoteboxError):
    """A unique field (username, email) is already taken."""

    status_code = 409
    default_message = "Resource already exists"


class InternalError(NoteboxError):
    """
    Something failed on our side: database errors, session store failures.

    The message stays generic; details belong in `context`.
    """

    status_code = 500
    default_message = GENERIC_ERROR_MESSAGE
