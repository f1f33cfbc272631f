"""
Notebox Backend — User SQLAlchemy Model
========================================

What:  ORM model representing the `users` table.
How:   `email` and `password_hash` are deferred columns: a plain
       `select(User)` does not load them. Queries that need them ask
       explicitly with `undefer(...)`, e.g. login (password) and the
       "who am I" endpoint (email).

Uniqueness:
    username and email each carry a UNIQUE constraint. UserService checks
    for duplicates first to produce specific messages; the constraint is the
    backstop for concurrent signups.
"""

import uuid

from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notebox.database import Base


class User(Base):
    """A registered account."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
    )

    email: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
        deferred=True,
    )

    # bcrypt output, e.g. "$2b$10$..." (60 chars)
    password_hash: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        deferred=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"
