"""
Notebox Client — Data Models
=============================

What:  Typed values the client returns and accepts.
How:   Pydantic models that read the API's wire names (`_id`, `createdAt`,
       `updatedAt`) and expose snake_case attributes.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Note(BaseModel):
    id: str = Field(alias="_id")
    title: str
    text: Optional[str] = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = {"populate_by_name": True}


class User(BaseModel):
    """The client never sees a password; only identity fields are modeled."""

    id: str = Field(alias="_id")
    username: str
    email: str

    model_config = {"populate_by_name": True}


class NoteInput(BaseModel):
    title: str
    text: Optional[str] = None


class SignUpCredentials(BaseModel):
    username: str
    email: str
    password: str


class LoginCredentials(BaseModel):
    username: str
    password: str
