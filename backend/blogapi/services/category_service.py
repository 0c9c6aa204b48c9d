"""
Blog API Backend - Category Service
====================================

What:  Business logic for categories and the Category → BlogPost sibling lookup.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.exceptions import ConflictError
from blogapi.models.category import Category
from blogapi.models.relations import CATEGORY_BLOGPOSTS
from blogapi.schemas.blogpost import BlogPostResponse
from blogapi.schemas.category import CategoryCreate, CategoryResponse
from blogapi.services.sql_repository import SQLAlchemyRepository

logger = logging.getLogger(__name__)


class CategoryService:

    @staticmethod
    def _categories(db: AsyncSession) -> SQLAlchemyRepository[Category]:
        return SQLAlchemyRepository(db, Category, "category")

    async def create_category(self, db: AsyncSession, data: CategoryCreate) -> CategoryResponse:
        repo = self._categories(db)
        if await repo.query(select(Category).where(Category.name == data.name)):
            raise ConflictError(
                message=f"Category '{data.name}' already exists",
                context={"field": "name"},
            )
        category = await repo.create(Category(name=data.name))
        return CategoryResponse.model_validate(category)

    async def get_category(self, db: AsyncSession, category_id: UUID) -> CategoryResponse:
        category = await self._categories(db).get(category_id)
        return CategoryResponse.model_validate(category)

    async def list_categories(
        self, db: AsyncSession, limit: Optional[int] = None, offset: int = 0
    ) -> Tuple[List[CategoryResponse], int]:
        repo = self._categories(db)
        categories = await repo.query_all(limit=limit, offset=offset, order_by="name")
        total = await repo.count()
        return [CategoryResponse.model_validate(c) for c in categories], total

    async def list_blogposts(self, db: AsyncSession, category_id: UUID) -> List[BlogPostResponse]:
        """Sibling lookup: posts reached through the pivot rows referencing this category."""
        repo = self._categories(db)
        category = await repo.get(category_id)
        posts = await repo.query_related(category, CATEGORY_BLOGPOSTS)
        return [BlogPostResponse.model_validate(p) for p in posts]


category_service = CategoryService()
