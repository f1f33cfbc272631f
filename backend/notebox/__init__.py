"""
Notebox Backend — Application Package Initializer
=================================================

What: Marks the `notebox` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │     Routes + Auth Guard (API)       │  ← HTTP concerns, cookies, status codes
    ├─────────────────────────────────────┤
    │         Services (Controllers)      │  ← Validation + one store operation
    ├─────────────────────────────────────┤
    │   Models, Schemas, Session Store    │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    `notebox.client` sits outside these layers: it is the HTTP client that
    talks to the API and turns responses into typed values or exceptions.
"""

__version__ = "1.0.0"
