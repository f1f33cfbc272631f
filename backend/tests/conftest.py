"""
Notebox Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:  AsyncMock database session (service unit tests)
    ├── db_engine:        throwaway SQLite database with all tables created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── session_store:    MemorySessionStore injected into the app
    ├── app:              create_app() wired to the fixtures above
    ├── test_client:      HTTPX AsyncClient over ASGITransport
    ├── logged_in_client: test_client after a successful signup
    └── db_store_client:  client for an app using DatabaseSessionStore
"""

import os
import tempfile

# Override settings for testing BEFORE any notebox import
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="notebox_test_"), "unused.db")
)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SESSION_STORE"] = "memory"

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

import notebox.models  # noqa: E402,F401
from notebox.database import Base, build_engine, build_session_factory, get_db_session  # noqa: E402
from notebox.main import create_app  # noqa: E402
from notebox.sessions import DatabaseSessionStore, MemorySessionStore, SessionStore  # noqa: E402

TEST_USER = {"username": "alice", "email": "alice@example.com", "password": "correct horse"}


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.get.return_value = note
            result = await note_service.get_note(mock_db_session, str(note.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database & Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A fresh SQLite database per test, schema created from Base.metadata."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'notebox.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def session_store():
    return MemorySessionStore()


def build_test_app(session_factory, store: SessionStore):
    """create_app() with get_db_session bound to the per-test engine."""
    application = create_app(session_store=store)

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_db_session
    return application


@pytest.fixture
def app(session_factory, session_store):
    """The application wired to the test database and an in-memory session store."""
    return build_test_app(session_factory, session_store)


@pytest_asyncio.fixture
async def db_store_client(session_factory):
    """
    Client for an app whose sessions live in the `sessions` table, sharing
    the SQLite database with the request sessions (the production default).
    """
    application = build_test_app(session_factory, DatabaseSessionStore(session_factory))
    transport = ASGITransport(app=application, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    raise_app_exceptions=False lets the catch-all handler's 500 response
    reach the test instead of re-raising the original exception.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def test_user():
    """Signup payload of the account created by logged_in_client."""
    return dict(TEST_USER)


@pytest_asyncio.fixture
async def logged_in_client(test_client, test_user):
    """test_client carrying the session cookie of a freshly signed-up user."""
    response = await test_client.post("/api/users/signup", json=test_user)
    assert response.status_code == 201
    return test_client
