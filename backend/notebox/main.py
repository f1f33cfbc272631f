"""
Notebox Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance;
       the module-level `app` is what uvicorn serves (notebox.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware Chain:                                      │
    │  ┌────────┐ ┌─────────┐ ┌──────┐ ┌──────┐ ┌──────────┐  │
    │  │ Req ID │→│ Logging │→│ GZip │→│ CORS │→│ Session  │  │
    │  └────────┘ └─────────┘ └──────┘ └──────┘ └──────────┘  │
    │                                                         │
    │  Routes:                                                │
    │  ┌────────────────┐ ┌────────────────┐ ┌─────────────┐  │
    │  │ /api/users/*   │ │ /api/notes/* 🔒│ │ GET /health │  │
    │  └────────────────┘ └────────────────┘ └─────────────┘  │
    │                                                         │
    │  Error Translator:                                      │
    │  ┌───────────────────────────────────────────────────┐  │
    │  │ NoteboxError → its status │ anything else → 500   │  │
    │  └───────────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────────┘

Every error response has the body {"error": "<message>"}.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notebox import __version__
from notebox.config import settings
from notebox.database import async_session_factory, dispose_engine
from notebox.exceptions import GENERIC_ERROR_MESSAGE, NoteboxError
from notebox.middleware.logging import RequestLoggingMiddleware
from notebox.middleware.request_id import RequestIDMiddleware, request_id_var
from notebox.middleware.session import SessionMiddleware
from notebox.routes import health, notes, users
from notebox.sessions import DatabaseSessionStore, MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, report configuration.
    Shutdown: dispose the database engine (close all pooled connections).
    """
    setup_logging()
    logger.info("Notebox backend %s starting up...", __version__)
    logger.info("Session store: %s", type(app.state.session_store).__name__)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Notebox backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    """First validation problem as "<field>: <reason>"."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    reason = first.get("msg", "Invalid request")
    if location:
        return f"{'.'.join(location)}: {reason}"
    return reason


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the centralized error translator.

    Handler hierarchy:
        NoteboxError            → exc.status_code, exc.message passed through
        RequestValidationError  → 400 (malformed JSON / ill-typed fields)
        HTTPException (routing) → its status; 404 becomes "Endpoint not found"
        Exception (fallback)    → 500 with the generic message

    Security: internal details (tracebacks, SQL, exc.context) are logged
    server-side only.
    """

    @app.exception_handler(NoteboxError)
    async def handle_app_error(request: Request, exc: NoteboxError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid,
                type(exc).__name__,
                exc.message,
                exc.context,
                exc_info=exc.__cause__ is not None,
            )
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        logger.info("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return _error(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, "Endpoint not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all for truly unexpected errors. Stack trace is logged, never returned."""
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=exc,
        )
        return _error(500, GENERIC_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_session_store() -> SessionStore:
    """The SessionStore selected by settings.session_store."""
    if settings.session_store == "memory":
        return MemorySessionStore()
    return DatabaseSessionStore(async_session_factory)


def create_app(session_store: Optional[SessionStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        session_store: server-side session persistence. Defaults to the
                       store selected by configuration.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Notebox API",
        description="Notes with cookie-based session authentication.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.session_store = (
        session_store if session_store is not None else build_session_store()
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = outermost)
    app.add_middleware(SessionMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,  # the session cookie must cross origins
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(users.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn on the configured address."""
    import uvicorn

    uvicorn.run(
        "notebox.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
