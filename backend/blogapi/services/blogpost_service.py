"""
Blog API Backend - Blog Post Service
=====================================

What:  Business logic for blog posts: CRUD, search, the parent (creator)
       lookup and the many-to-many category associations.
How:   Three repositories share the request's session: posts, users (to
       resolve the creator) and categories, plus one over the pivot model for
       association rows.

Association flow (POST /api/blogposts/{id}/categories/{category_id}):
    ┌───────────┐    ┌──────────────┐    ┌────────────────┐    ┌─────────┐
    │ get post  │───▶│ get category │───▶│ pivot exists?  │─no▶│ attach  │
    └───────────┘    └──────────────┘    └────────────────┘    └─────────┘
                                               │ yes
                                               ▼
                                         existing pivot returned

    Either id missing → NotFoundError. Re-attaching a pair is idempotent.
    If a concurrent request inserts the same pair first, the unique
    constraint rejects this insert (inside a savepoint) and the winner's
    pivot is returned instead.
"""

import logging
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import asc, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.exceptions import ConflictError, NotFoundError, ValidationError
from blogapi.models.blogpost import BlogPost
from blogapi.models.category import BlogPostCategoryPivot, Category
from blogapi.models.relations import BLOGPOST_CATEGORIES, BLOGPOST_CREATOR
from blogapi.models.user import User
from blogapi.schemas.blogpost import (
    BlogPostCategoryResponse,
    BlogPostCreate,
    BlogPostResponse,
    BlogPostUpdate,
)
from blogapi.schemas.category import CategoryResponse
from blogapi.schemas.user import UserResponse
from blogapi.services.sql_repository import SQLAlchemyRepository

logger = logging.getLogger(__name__)

# sort parameter → ORDER BY clause
SORT_OPTIONS: Dict[str, tuple] = {
    "created_at_asc": (asc(BlogPost.created_at),),
    "created_at_desc": (desc(BlogPost.created_at),),
    "title_asc": (asc(BlogPost.title), asc(BlogPost.created_at)),
    "title_desc": (desc(BlogPost.title), asc(BlogPost.created_at)),
}


def _like_pattern(term: str) -> str:
    """Wrap a user term for ILIKE, escaping the wildcard characters it contains."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class BlogPostService:
    """
    Stateless service for /api/blogposts.

    Error Handling Strategy:
        Repositories already translate store failures into DatabaseError /
        ConflictError; this layer only adds NotFoundError for references that
        do not resolve and ValidationError for unusable input.
    """

    @staticmethod
    def _posts(db: AsyncSession) -> SQLAlchemyRepository[BlogPost]:
        return SQLAlchemyRepository(db, BlogPost, "blog post")

    @staticmethod
    def _users(db: AsyncSession) -> SQLAlchemyRepository[User]:
        return SQLAlchemyRepository(db, User, "user")

    @staticmethod
    def _categories(db: AsyncSession) -> SQLAlchemyRepository[Category]:
        return SQLAlchemyRepository(db, Category, "category")

    @staticmethod
    def _pivots(db: AsyncSession) -> SQLAlchemyRepository[BlogPostCategoryPivot]:
        return SQLAlchemyRepository(db, BlogPostCategoryPivot, "category association")

    # ── CRUD ──────────────────────────────────────────────────────────────

    async def create_blogpost(self, db: AsyncSession, data: BlogPostCreate) -> BlogPostResponse:
        """
        Create a post owned by data.user_id.

        Raises:
            NotFoundError: the referenced user does not exist (→ 404)
        """
        await self._users(db).get(data.user_id)
        post = await self._posts(db).create(
            BlogPost(title=data.title, content=data.content, user_id=data.user_id)
        )
        return BlogPostResponse.model_validate(post)

    async def get_blogpost(self, db: AsyncSession, post_id: UUID) -> BlogPostResponse:
        post = await self._posts(db).get(post_id)
        return BlogPostResponse.model_validate(post)

    async def list_blogposts(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
        offset: int = 0,
        sort: str = "created_at_asc",
    ) -> Tuple[List[BlogPostResponse], int]:
        if sort not in SORT_OPTIONS:
            raise ValidationError(
                message=f"Invalid sort '{sort}'. Must be one of: {sorted(SORT_OPTIONS)}",
                field="sort",
            )
        repo = self._posts(db)
        stmt = select(BlogPost).order_by(*SORT_OPTIONS[sort])
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        posts = await repo.query(stmt)
        total = await repo.count()
        return [BlogPostResponse.model_validate(p) for p in posts], total

    async def search_blogposts(self, db: AsyncSession, term: str) -> List[BlogPostResponse]:
        """Case-insensitive substring match on title or content."""
        term = (term or "").strip()
        if not term:
            raise ValidationError(message="Search term must not be empty", field="term")

        pattern = _like_pattern(term)
        stmt = (
            select(BlogPost)
            .where(
                or_(
                    BlogPost.title.ilike(pattern, escape="\\"),
                    BlogPost.content.ilike(pattern, escape="\\"),
                )
            )
            .order_by(asc(BlogPost.created_at))
        )
        posts = await self._posts(db).query(stmt)
        logger.info("Search '%s' matched %d blog posts", term, len(posts))
        return [BlogPostResponse.model_validate(p) for p in posts]

    async def update_blogpost(
        self, db: AsyncSession, post_id: UUID, data: BlogPostUpdate
    ) -> BlogPostResponse:
        values = data.model_dump(exclude_unset=True, exclude_none=True)
        if not values:
            raise ValidationError(message="Provide at least one field to update")

        repo = self._posts(db)
        post = await repo.get(post_id)
        if "user_id" in values:
            # Reassigning the creator must keep the reference resolvable
            await self._users(db).get(values["user_id"])
        post = await repo.update(post, values)
        return BlogPostResponse.model_validate(post)

    async def delete_blogpost(self, db: AsyncSession, post_id: UUID) -> None:
        """Detach every category explicitly, then delete the post."""
        repo = self._posts(db)
        post = await repo.get(post_id)
        pivots = self._pivots(db)
        for pivot in await pivots.query(BLOGPOST_CATEGORIES.pivots_of(post.id)):
            await pivots.delete(pivot)
        await repo.delete(post)

    # ── Parent lookup ─────────────────────────────────────────────────────

    async def get_creator(self, db: AsyncSession, post_id: UUID) -> UserResponse:
        """
        Resolve the post's stored user_id to exactly one user.

        Raises:
            NotFoundError: the post is missing, or its user_id no longer
                           resolves (only possible if the store lost integrity)
        """
        repo = self._posts(db)
        post = await repo.get(post_id)
        parents = await repo.query_related(post, BLOGPOST_CREATOR)
        if not parents:
            logger.error("Blog post %s references missing user %s", post.id, post.user_id)
            raise NotFoundError(resource="user", resource_id=str(post.user_id))
        return UserResponse.model_validate(parents[0])

    # ── Sibling lookup & associations ─────────────────────────────────────

    async def list_categories(self, db: AsyncSession, post_id: UUID) -> List[CategoryResponse]:
        repo = self._posts(db)
        post = await repo.get(post_id)
        categories = await repo.query_related(post, BLOGPOST_CATEGORIES)
        return [CategoryResponse.model_validate(c) for c in categories]

    async def add_category(
        self, db: AsyncSession, post_id: UUID, category_id: UUID
    ) -> BlogPostCategoryResponse:
        post = await self._posts(db).get(post_id)
        category = await self._categories(db).get(category_id)

        pivots = self._pivots(db)
        lookup = BLOGPOST_CATEGORIES.pivot_lookup(post.id, category.id)
        existing = await pivots.query(lookup)
        if existing:
            logger.info("Blog post %s already in category %s", post.id, category.id)
            return BlogPostCategoryResponse.model_validate(existing[0])

        try:
            # A lost race rolls back to this savepoint only
            async with db.begin_nested():
                pivot = await pivots.create(BLOGPOST_CATEGORIES.attach(post.id, category.id))
        except ConflictError:
            existing = await pivots.query(lookup)
            if not existing:
                raise
            logger.info("Blog post %s was put in category %s concurrently", post.id, category.id)
            return BlogPostCategoryResponse.model_validate(existing[0])
        return BlogPostCategoryResponse.model_validate(pivot)

    async def remove_category(self, db: AsyncSession, post_id: UUID, category_id: UUID) -> None:
        post = await self._posts(db).get(post_id)
        category = await self._categories(db).get(category_id)

        pivots = self._pivots(db)
        existing = await pivots.query(BLOGPOST_CATEGORIES.pivot_lookup(post.id, category.id))
        if not existing:
            raise NotFoundError(
                resource="category association",
                resource_id=f"{post.id}/{category.id}",
            )
        for pivot in existing:
            await pivots.delete(pivot)


blogpost_service = BlogPostService()
