"""
Notebox Client — HTTP Errors
=============================

What:  Exceptions raised by the client when the API answers with a failure.

Hierarchy:
    HttpError               any non-2xx response (status_code attached)
    ├── UnauthorizedError   401: no session, or bad credentials
    └── ConflictError       409: username/email already taken

The message is the server's `error` field, ready to show to a user.
"""

from typing import Optional


class HttpError(Exception):
    """A failed API call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UnauthorizedError(HttpError):
    """Status Code: 401"""


class ConflictError(HttpError):
    """Status Code: 409"""
