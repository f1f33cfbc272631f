"""
Notebox Backend — Request Logging Middleware
=============================================

What:  One access-log line per HTTP request on the `notebox.access` logger.
How:   Times the downstream call and, once the response exists, records
       method, path, status, duration, request id, client IP and whether
       the request carried an authenticated session.

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, IP, request ID, user id
    ❌ Don't log: request bodies (passwords), cookies (session ids)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notebox.middleware.request_id import request_id_var

logger = logging.getLogger("notebox.access")


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, anything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for every route except the health probe."""

    # Probed every few seconds by orchestrators
    SKIPPED_PATHS = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        # Set by SessionMiddleware, which runs inside this one
        session = getattr(request.state, "session", None)
        user_id = str(session.user_id) if session and session.is_authenticated else "-"
        client_ip = request.client.host if request.client else "unknown"

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            user_id,
            client_ip,
            extra={
                "request_id": request_id_var.get(""),
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
        return response
