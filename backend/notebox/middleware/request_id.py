"""
Notebox Backend — Request ID Middleware
========================================

What:  Assigns a short correlation id to each request and echoes it back.
How:   Uses the client's X-Request-ID header if present, otherwise a fresh
       8-character UUID prefix. Stored in a ContextVar for loggers and in
       request.state for handlers, returned in the X-Request-ID header.
When:  Outermost application middleware (runs before session handling).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
