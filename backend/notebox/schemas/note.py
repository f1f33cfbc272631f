"""
Notebox Backend — Note Request/Response Schemas
================================================

What:  Pydantic models defining the notes API contract.
How:   FastAPI validates request bodies against NoteInput and serializes
       responses through NoteResponse (by alias, so the wire format keeps
       `_id`, `createdAt`, `updatedAt`).

Request fields are Optional on purpose: a missing title must reach
NoteService and produce `400 "Note must have a title"` rather than a
framework validation message.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteInput(BaseModel):
    """Body of POST /api/notes/ and PATCH /api/notes/{noteId}."""

    title: Optional[str] = Field(default=None, description="Note title (required, non-empty)")
    text: Optional[str] = Field(default=None, description="Optional note body")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Full representation of a note.
    Who:   Returned by every notes endpoint except DELETE.
    """

    id: uuid.UUID = Field(alias="_id", description="Unique note identifier (UUID)")
    title: str = Field(description="Note title")
    text: Optional[str] = Field(default=None, description="Note body")
    created_at: datetime = Field(alias="createdAt", description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(alias="updatedAt", description="Last update time (UTC ISO 8601)")

    model_config = {"from_attributes": True, "populate_by_name": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Some backends (SQLite) drop tzinfo; stored values are always UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
