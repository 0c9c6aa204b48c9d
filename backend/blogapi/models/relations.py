"""
Blog API Backend - Relationship Descriptors
============================================

What:  Metadata objects describing how two entity types are linked, and the
       SELECT each one needs to walk from a source entity to its related rows.
How:   Relationships are id references, never loaded object graphs. Every
       descriptor turns a source entity into a single explicit statement, which
       Repository.query_related() executes. Nothing is lazy-loaded, so async
       sessions never trip over implicit IO.

    Parent    child.fk      → target.id               (to-one)
    Children  source.id     → target.fk               (one-to-many)
    Siblings  source.id     → pivot.local_key
              pivot.remote_key → target.id            (many-to-many)
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Type

from sqlalchemy import Select, select

from blogapi.database import Base
from blogapi.models.blogpost import BlogPost
from blogapi.models.category import BlogPostCategoryPivot, Category
from blogapi.models.user import User


class Relationship(ABC):
    """Common interface: the target model and the statement reaching it."""

    target: Type[Base]
    order_by: Optional[str]

    @abstractmethod
    def statement(self, source: Any) -> Select:
        """SELECT reaching the related rows of `source`."""
        ...

    def _ordered(self, stmt: Select) -> Select:
        if self.order_by:
            stmt = stmt.order_by(getattr(self.target, self.order_by))
        return stmt


@dataclass(frozen=True)
class Parent(Relationship):
    """
    To-one link held by the child.

    `foreign_key` is the attribute on the *source* (child) that stores the
    parent's id, e.g. BlogPost.user_id.
    """

    target: Type[Base]
    foreign_key: str
    order_by: Optional[str] = None

    def statement(self, source: Any) -> Select:
        parent_id = getattr(source, self.foreign_key)
        return select(self.target).where(self.target.id == parent_id)


@dataclass(frozen=True)
class Children(Relationship):
    """
    One-to-many link seen from the parent.

    `foreign_key` is the attribute on the *target* (child) that references the
    source's id.
    """

    target: Type[Base]
    foreign_key: str
    order_by: Optional[str] = "created_at"

    def statement(self, source: Any) -> Select:
        stmt = select(self.target).where(getattr(self.target, self.foreign_key) == source.id)
        return self._ordered(stmt)


@dataclass(frozen=True)
class Siblings(Relationship):
    """
    Many-to-many link through a pivot model.

    `local_key` is the pivot column referencing the source, `remote_key` the
    pivot column referencing the target.
    """

    target: Type[Base]
    pivot: Type[Base]
    local_key: str
    remote_key: str
    order_by: Optional[str] = "created_at"

    def statement(self, source: Any) -> Select:
        stmt = (
            select(self.target)
            .join(self.pivot, getattr(self.pivot, self.remote_key) == self.target.id)
            .where(getattr(self.pivot, self.local_key) == source.id)
        )
        return self._ordered(stmt)

    def pivot_lookup(self, source_id: uuid.UUID, target_id: uuid.UUID) -> Select:
        """Pivot rows linking exactly this pair."""
        return select(self.pivot).where(
            getattr(self.pivot, self.local_key) == source_id,
            getattr(self.pivot, self.remote_key) == target_id,
        )

    def pivots_of(self, source_id: uuid.UUID) -> Select:
        """Every pivot row referencing the source."""
        return select(self.pivot).where(getattr(self.pivot, self.local_key) == source_id)

    def attach(self, source_id: uuid.UUID, target_id: uuid.UUID) -> Base:
        """Build (but do not persist) the pivot row for one association."""
        return self.pivot(**{self.local_key: source_id, self.remote_key: target_id})


# ── Named relationships ───────────────────────────────────────────────────
BLOGPOST_CREATOR = Parent(target=User, foreign_key="user_id")
USER_BLOGPOSTS = Children(target=BlogPost, foreign_key="user_id")
BLOGPOST_CATEGORIES = Siblings(
    target=Category,
    pivot=BlogPostCategoryPivot,
    local_key="blogpost_id",
    remote_key="category_id",
    order_by="name",
)
CATEGORY_BLOGPOSTS = Siblings(
    target=BlogPost,
    pivot=BlogPostCategoryPivot,
    local_key="category_id",
    remote_key="blogpost_id",
)
