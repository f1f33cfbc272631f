"""
Notebox Backend — Session Store
================================

What:  Server-side session state: session id → (user id, expiry).
How:   SessionStore is the injected collaborator. create_app() receives one
       and SessionMiddleware / the user routes talk only to that interface,
       so any backing store can be substituted.
Who:   SessionMiddleware (load + rolling renewal), users routes (establish,
       destroy), tests (MemorySessionStore).

Contract:
    get(sid)        → SessionRecord, or None if unknown or expired
    set(sid, rec)   → create or overwrite (also used for rolling renewal)
    destroy(sid)    → remove; unknown ids are a no-op
    Every method either completes or raises. Callers translate failures into
    InternalError; nothing here swallows them.

Implementations:
    DatabaseSessionStore: `sessions` table, keyed by SHA-256 of the id
    MemorySessionStore:   dict, for tests and single-process development
"""

import hashlib
import logging
import secrets
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notebox.models.session import SessionRow

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """Opaque, URL-safe session token (256 bits of entropy)."""
    return secrets.token_urlsafe(32)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class SessionRecord:
    """What the store keeps for one session."""

    user_id: uuid.UUID
    expires_at: datetime

    @classmethod
    def starting_now(cls, user_id: uuid.UUID, max_age: int) -> "SessionRecord":
        return cls(
            user_id=user_id,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=max_age),
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return _as_utc(self.expires_at) <= now


class SessionStore(ABC):
    """Abstract interface for session persistence."""

    @abstractmethod
    async def get(self, sid: str) -> Optional[SessionRecord]:
        """Returns the live record for `sid`, or None."""
        ...

    @abstractmethod
    async def set(self, sid: str, record: SessionRecord) -> None:
        """Creates or replaces the record for `sid`."""
        ...

    @abstractmethod
    async def destroy(self, sid: str) -> None:
        """Removes the record for `sid` if present."""
        ...


class MemorySessionStore(SessionStore):
    """
    In-process store.

    Not shared between worker processes and lost on restart; intended for
    tests and local development (SESSION_STORE=memory).
    """

    def __init__(self) -> None:
        self._records: Dict[str, SessionRecord] = {}

    async def get(self, sid: str) -> Optional[SessionRecord]:
        record = self._records.get(sid)
        if record is None:
            return None
        if record.is_expired():
            del self._records[sid]
            return None
        return record

    async def set(self, sid: str, record: SessionRecord) -> None:
        self._records[sid] = record

    async def destroy(self, sid: str) -> None:
        self._records.pop(sid, None)

    def __len__(self) -> int:
        return len(self._records)


class DatabaseSessionStore(SessionStore):
    """
    Store backed by the `sessions` table.

    Each operation opens its own short transaction from `session_factory`,
    independent of the request's database session, so a session write is
    committed even when the request handler later fails.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _key(sid: str) -> str:
        return hashlib.sha256(sid.encode("utf-8")).hexdigest()

    async def get(self, sid: str) -> Optional[SessionRecord]:
        key = self._key(sid)
        async with self._session_factory() as db:
            row = (
                await db.execute(select(SessionRow).where(SessionRow.token_hash == key))
            ).scalar_one_or_none()
            if row is None:
                return None
            record = SessionRecord(user_id=row.user_id, expires_at=_as_utc(row.expires_at))
            if record.is_expired():
                await db.execute(delete(SessionRow).where(SessionRow.token_hash == key))
                await db.commit()
                logger.debug("Expired session removed for user %s", record.user_id)
                return None
            return record

    async def set(self, sid: str, record: SessionRecord) -> None:
        key = self._key(sid)
        async with self._session_factory() as db:
            row = await db.get(SessionRow, key)
            if row is None:
                db.add(
                    SessionRow(
                        token_hash=key,
                        user_id=record.user_id,
                        expires_at=record.expires_at,
                    )
                )
            else:
                row.user_id = record.user_id
                row.expires_at = record.expires_at
            await db.commit()

    async def destroy(self, sid: str) -> None:
        async with self._session_factory() as db:
            await db.execute(delete(SessionRow).where(SessionRow.token_hash == self._key(sid)))
            await db.commit()
