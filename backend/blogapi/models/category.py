"""
Blog API Backend - Category and Pivot SQLAlchemy Models
========================================================

What:  ORM models for the `categories` table and the `blogpost_category_pivot`
       join table that realizes BlogPost ←→ Category.

Architecture:
    BlogPost ←→ BlogPostCategoryPivot ←→ Category

    Each pivot row is one association instance with its own id. The pair
    (blogpost_id, category_id) is unique, so a post is tagged with a given
    category at most once. Pivot rows cascade when either side is deleted at
    the database level; the service also detaches explicitly before deleting
    a post, so SQLite (no FK enforcement by default) behaves the same.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from blogapi.database import Base


class Category(Base):
    """A named tag that blog posts can be filed under."""

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Unique category name",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this category was created (UTC)",
    )

    __table_args__ = (
        UniqueConstraint("name", name="uq_categories_name"),
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class BlogPostCategoryPivot(Base):
    """
    Join record associating one blog post with one category.

    Created by POST /api/blogposts/{id}/categories/{category_id};
    deleted by the matching DELETE or when the post is deleted.
    """

    __tablename__ = "blogpost_category_pivot"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier of this association",
    )

    blogpost_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("blogposts.id", ondelete="CASCADE"),
        nullable=False,
        comment="Associated blog post (blogposts.id)",
    )

    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        comment="Associated category (categories.id)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the association was made (UTC)",
    )

    __table_args__ = (
        UniqueConstraint("blogpost_id", "category_id", name="uq_blogpost_category"),
        Index("idx_pivot_blogpost_id", "blogpost_id"),
        Index("idx_pivot_category_id", "category_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<BlogPostCategoryPivot(id={self.id}, "
            f"blogpost_id={self.blogpost_id}, category_id={self.category_id})>"
        )
