"""
Notebox Backend — Note SQLAlchemy Model
========================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key, generated in Python so every backend gets one
    - title: required, never empty at rest (enforced in NoteService and by a
      CHECK constraint)
    - text: optional body
    - created_at / updated_at: UTC timestamps assigned by the service; equal
      on creation, updated_at bumped on every update
    - no owner column: every authenticated user sees the same note pool
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notebox.database import Base


def utcnow() -> datetime:
    """Timezone-aware current time; all timestamps are stored in UTC."""
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A text note.

    Query Patterns:
        - List all notes: SELECT ... ORDER BY created_at ASC
          → idx_notes_created_at
        - Get single note: SELECT ... WHERE id = :uuid → primary key
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    text: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        CheckConstraint("length(title) > 0", name="ck_notes_title_not_empty"),
        Index("idx_notes_created_at", created_at),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, updated_at='{self.updated_at}')>"
