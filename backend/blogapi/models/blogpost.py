"""
Blog API Backend - BlogPost SQLAlchemy Model
=============================================

What:  ORM model representing the `blogposts` table.
Who:   Used by BlogPostService through the repository, and by Alembic.

Table Design:
    - user_id: owning-side foreign key to users.id (exactly one creator)
    - No ON DELETE CASCADE: a user cannot be removed while posts reference it
    - Categories are attached through blogpost_category_pivot, never stored here

    Index on user_id:
        Serves the children lookup, GET /api/users/{id}/blogposts
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from blogapi.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BlogPost(Base):
    """
    Represents a blog post written by a single user.

    Query Patterns:
        - Posts of a user:     WHERE user_id = :user_id   (idx_blogposts_user_id)
        - Posts of a category: JOIN blogpost_category_pivot ON blogpost_id
        - Search:              WHERE title ILIKE :term OR content ILIKE :term
    """

    __tablename__ = "blogposts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Post title",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Post body",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Creator of the post (users.id)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this post was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this post was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_blogposts_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<BlogPost(id={self.id}, title='{self.title}', user_id={self.user_id})>"
