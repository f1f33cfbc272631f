"""
Notebox Backend — Database Session Management
==============================================

What:  Engine and session-factory builders, the declarative Base and the
       per-request session dependency.
How:   build_engine() applies pool settings for server databases;
       get_db_session() commits when the handler returns and rolls back
       when it raises.
Who:   Used by route handlers via FastAPI's dependency injection system, and
       by the database-backed session store.
When:  The default engine is built at import; tests build their own.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings.
    pool_recycle=3600 recycles connections every hour.
    SQLite URLs (used by the test suite) skip the pool options entirely.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notebox.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    What:  Keyword arguments for create_async_engine() for a given URL.
    How:   Server databases get the configured pool; SQLite gets none.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


def build_engine(database_url: str) -> AsyncEngine:
    """Creates an async engine configured for the given URL."""
    return create_async_engine(database_url, **engine_options(database_url))


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    What:  Session factory bound to an engine.
    Note:  expire_on_commit=False keeps attributes readable after commit,
           which the route layer relies on when serializing responses.
    """
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


# ── Engine & Session Factory ──────────────────────────────────────────────
engine = build_engine(settings.database_url)
async_session_factory = build_session_factory(engine)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic reads for
    migrations and the test suite uses for create_all().
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    One AsyncSession per request, committed after the handler succeeds.

    Errors roll the transaction back and propagate to the error
    translator. Tests swap this out through app.dependency_overrides.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Closes all pooled connections. Called during application shutdown."""
    await engine.dispose()
