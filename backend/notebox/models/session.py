"""
Notebox Backend — Session SQLAlchemy Model
===========================================

What:  Rows backing DatabaseSessionStore (see notebox/sessions.py).
How:   The primary key is the SHA-256 hex digest of the session id; the raw
       id only ever exists in the client's cookie. Expired rows are ignored
       and deleted lazily on lookup.

There is no foreign key to users: a session keeps the user id it was
created with, and user deletion does not exist.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notebox.database import Base


class SessionRow(Base):
    """One authenticated session."""

    __tablename__ = "sessions"

    token_hash: Mapped[str] = mapped_column(String(64), primary_key=True)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_sessions_expires_at", expires_at),
    )

    def __repr__(self) -> str:
        return f"<SessionRow(user_id={self.user_id}, expires_at='{self.expires_at}')>"
