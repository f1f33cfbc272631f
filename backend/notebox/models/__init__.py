"""ORM models. Importing this package registers every table with Base.metadata."""

from notebox.models.note import Note
from notebox.models.session import SessionRow
from notebox.models.user import User

__all__ = ["Note", "SessionRow", "User"]
