"""
Blog API Backend - User Request/Response Schemas
=================================================

What:  Pydantic models defining the API contract for /api/users.
How:   FastAPI validates request bodies against the *Create/*Update models and
       serializes ORM rows through *Response (from_attributes=True).
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _strip_required(v: str) -> str:
    stripped = v.strip()
    if not stripped:
        raise ValueError("must not be blank")
    return stripped


class UserCreate(BaseModel):
    """
    Body of POST /api/users.

    Example:
        {"name": "Ann", "username": "ann1"}
    """
    name: str = Field(min_length=1, max_length=255, description="Display name")
    username: str = Field(min_length=1, max_length=64, description="Unique login handle")

    @field_validator("name", "username")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _strip_required(v)


class UserUpdate(BaseModel):
    """Body of PUT /api/users/{id}. Omitted fields keep their stored value."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    username: Optional[str] = Field(default=None, min_length=1, max_length=64)

    @field_validator("name", "username")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else v


class UserResponse(BaseModel):
    """Full representation of a user."""
    id: uuid.UUID = Field(description="Unique user identifier (UUID)")
    name: str
    username: str
    created_at: datetime = Field(description="When the user was created (UTC ISO 8601)")

    model_config = {"from_attributes": True}
