"""
Blog API Backend - Category Request/Response Schemas
=====================================================
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class CategoryCreate(BaseModel):
    """Body of POST /api/categories."""
    name: str = Field(min_length=1, max_length=100, description="Unique category name")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class CategoryResponse(BaseModel):
    id: uuid.UUID = Field(description="Unique category identifier (UUID)")
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}
