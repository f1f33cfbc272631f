"""
Notebox Backend — Session Middleware
=====================================

What:  Binds the session cookie to server-side session state for each request.
How:   Before the handler: read the cookie, look the id up in the injected
       SessionStore, expose the result as `request.state.session`.
       After the handler: renew the expiry (rolling sessions), re-issue or
       clear the cookie.
Who:   Applied to every request via Starlette middleware. Route handlers
       call start_session() / end_session(); the auth guard reads
       request.state.session.user_id.

Cookie:
    HttpOnly, SameSite=Lax, path "/", Max-Age = session_max_age.
    Only the opaque id travels; the user id never leaves the server.

Failure handling:
    This middleware sits outside FastAPI's exception handlers, so a store
    failure here is logged and answered directly with the standard
    `{"error": ...}` 500 body.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from notebox.config import settings
from notebox.exceptions import GENERIC_ERROR_MESSAGE, InternalError
from notebox.middleware.request_id import request_id_var
from notebox.sessions import SessionRecord, SessionStore, new_session_id

logger = logging.getLogger(__name__)


@dataclass
class RequestSession:
    """
    Per-request view of the session.

    Attributes:
        sid:       Session id from the cookie (or freshly issued), None if anonymous
        user_id:   Authenticated user, None if anonymous
        max_age:   Lifetime in seconds applied on issue and renewal
        issued:    A new session was established during this request
        destroyed: The session was destroyed during this request
    """

    sid: Optional[str] = None
    user_id: Optional[uuid.UUID] = None
    max_age: int = 3600
    issued: bool = False
    destroyed: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def get_session(request: Request) -> RequestSession:
    """Returns the request's session view (anonymous if the middleware did not run)."""
    session = getattr(request.state, "session", None)
    if session is None:
        session = RequestSession(max_age=settings.session_max_age)
        request.state.session = session
    return session


def _store(request: Request) -> SessionStore:
    return request.app.state.session_store


async def start_session(request: Request, user_id: uuid.UUID) -> None:
    """
    Establishes a new session bound to `user_id`.

    A previous session on the same request is destroyed first, so a login
    always receives a fresh id.

    Raises:
        InternalError: the store could not be written
    """
    session = get_session(request)
    store = _store(request)
    sid = new_session_id()
    try:
        if session.sid:
            await store.destroy(session.sid)
        await store.set(sid, SessionRecord.starting_now(user_id, session.max_age))
    except Exception as e:
        logger.error("Could not establish session for user %s: %s", user_id, e, exc_info=True)
        raise InternalError(context={"user_id": str(user_id)}) from e

    session.sid = sid
    session.user_id = user_id
    session.issued = True
    session.destroyed = False


async def end_session(request: Request) -> None:
    """
    Destroys the current session server-side.

    Raises:
        InternalError: the store could not remove the session
    """
    session = get_session(request)
    if session.sid:
        try:
            await _store(request).destroy(session.sid)
        except Exception as e:
            logger.error("Could not destroy session: %s", e, exc_info=True)
            raise InternalError(context={"operation": "session_destroy"}) from e

    session.sid = None
    session.user_id = None
    session.issued = False
    session.destroyed = True


def _store_failure() -> Response:
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})


class SessionMiddleware(BaseHTTPMiddleware):
    """
    Loads and persists session state around every request.

    Behavior:
        1. Cookie present and live in the store → request is authenticated
        2. Cookie present but unknown/expired → anonymous, cookie cleared
        3. After the handler, an authenticated session gets its expiry
           pushed forward by max_age and the cookie re-issued
    """

    def __init__(
        self,
        app: ASGIApp,
        cookie_name: Optional[str] = None,
        max_age: Optional[int] = None,
        secure: Optional[bool] = None,
    ):
        super().__init__(app)
        self.cookie_name = cookie_name or settings.session_cookie_name
        self.max_age = max_age or settings.session_max_age
        self.secure = settings.session_cookie_secure if secure is None else secure

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        store: SessionStore = request.app.state.session_store
        session = RequestSession(max_age=self.max_age)
        stale_cookie = False

        sid = request.cookies.get(self.cookie_name)
        if sid:
            try:
                record = await store.get(sid)
            except Exception as e:
                logger.error(
                    "[%s] Session lookup failed: %s", request_id_var.get(""), e, exc_info=True
                )
                return _store_failure()
            if record is not None:
                session.sid = sid
                session.user_id = record.user_id
            else:
                stale_cookie = True

        request.state.session = session
        response = await call_next(request)

        if session.destroyed or (stale_cookie and not session.issued):
            self._clear_cookie(response)
            return response

        if session.is_authenticated:
            if not session.issued:
                # Rolling expiry: every authenticated request extends the session
                try:
                    await store.set(
                        session.sid, SessionRecord.starting_now(session.user_id, self.max_age)
                    )
                except Exception as e:
                    logger.error(
                        "[%s] Session renewal failed: %s", request_id_var.get(""), e, exc_info=True
                    )
                    return _store_failure()
            self._set_cookie(response, session.sid)

        return response

    def _set_cookie(self, response: Response, sid: str) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=sid,
            max_age=self.max_age,
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )

    def _clear_cookie(self, response: Response) -> None:
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )
