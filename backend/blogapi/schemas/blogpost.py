"""
Blog API Backend - Blog Post Request/Response Schemas
======================================================

What:  Pydantic models defining the API contract for /api/blogposts, including
       the pivot record returned when a category is attached.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BlogPostCreate(BaseModel):
    """
    Body of POST /api/blogposts.

    user_id must reference an existing user; an unknown id is a 404.
    """
    title: str = Field(min_length=1, max_length=255, description="Post title")
    content: str = Field(default="", description="Post body")
    user_id: uuid.UUID = Field(description="Creator of the post")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class BlogPostUpdate(BaseModel):
    """Body of PUT /api/blogposts/{id}. Omitted fields keep their stored value."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = None
    user_id: Optional[uuid.UUID] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class BlogPostResponse(BaseModel):
    """Full representation of a blog post."""
    id: uuid.UUID = Field(description="Unique post identifier (UUID)")
    title: str
    content: str
    user_id: uuid.UUID = Field(description="Creator of the post")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BlogPostCategoryResponse(BaseModel):
    """
    One association between a blog post and a category.

    Returned by POST /api/blogposts/{id}/categories/{category_id}.
    """
    id: uuid.UUID = Field(description="Identifier of the pivot row")
    blogpost_id: uuid.UUID
    category_id: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}
