"""
Notebox Backend — User Request/Response Schemas
================================================

What:  Pydantic models for signup, login and the authenticated-user endpoint.
Note:  UserResponse has no password field at all, so a hash can never be
       serialized by accident.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class SignUpInput(BaseModel):
    """Body of POST /api/users/signup. Presence is checked by UserService."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginInput(BaseModel):
    """Body of POST /api/users/login."""

    username: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """
    What:  Public view of an account.
    Who:   Returned by signup, login and GET /api/users/.
    """

    id: uuid.UUID = Field(alias="_id", description="Unique user identifier (UUID)")
    username: str = Field(description="Unique username")
    email: str = Field(description="Account email address")

    model_config = {"from_attributes": True, "populate_by_name": True}
