"""
Blog API Backend - Category Route Handlers
===========================================

What:  /api/categories create/list/get plus the Category → BlogPost sibling lookup.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.config import settings
from blogapi.database import get_db_session
from blogapi.schemas.blogpost import BlogPostResponse
from blogapi.schemas.category import CategoryCreate, CategoryResponse
from blogapi.schemas.common import ErrorResponse
from blogapi.services.category_service import category_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["Categories"])

NOT_FOUND = {404: {"description": "Category not found", "model": ErrorResponse}}


@router.get("", response_model=List[CategoryResponse], summary="List all categories")
async def list_categories(
    response: Response,
    limit: int | None = Query(default=None, ge=1, le=settings.max_page_size),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[CategoryResponse]:
    categories, total = await category_service.list_categories(
        db=db, limit=limit or settings.default_page_size, offset=offset
    )
    response.headers["X-Total-Count"] = str(total)
    return categories


@router.post(
    "",
    status_code=201,
    response_model=CategoryResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        409: {"description": "Category name taken", "model": ErrorResponse},
    },
    summary="Create a category",
)
async def create_category(
    body: CategoryCreate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> CategoryResponse:
    return await category_service.create_category(db=db, data=body)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses=NOT_FOUND,
    summary="Get a single category by ID",
)
async def get_category(
    category_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> CategoryResponse:
    return await category_service.get_category(db=db, category_id=category_id)


@router.get(
    "/{category_id}/blogposts",
    response_model=List[BlogPostResponse],
    responses=NOT_FOUND,
    summary="List the blog posts filed under a category",
)
async def list_category_blogposts(
    category_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[BlogPostResponse]:
    return await category_service.list_blogposts(db=db, category_id=category_id)
