"""
Blog API Backend - Blog Post Route Handlers
============================================

What:  /api/blogposts CRUD and search, the creator (parent) lookup, and the
       category (sibling) lookup and association endpoints.

Route order matters: /search is registered before /{post_id} so the literal
segment is not parsed as an id.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.config import settings
from blogapi.database import get_db_session
from blogapi.schemas.blogpost import (
    BlogPostCategoryResponse,
    BlogPostCreate,
    BlogPostResponse,
    BlogPostUpdate,
)
from blogapi.schemas.category import CategoryResponse
from blogapi.schemas.common import ErrorResponse
from blogapi.schemas.user import UserResponse
from blogapi.services.blogpost_service import blogpost_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blogposts", tags=["Blog Posts"])

NOT_FOUND = {404: {"description": "Blog post not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[BlogPostResponse],
    responses={400: {"description": "Invalid sort", "model": ErrorResponse}},
    summary="List all blog posts",
)
async def list_blogposts(
    response: Response,
    limit: int | None = Query(default=None, ge=1, le=settings.max_page_size),
    offset: int = Query(default=0, ge=0),
    sort: str = Query(
        default="created_at_asc",
        description="created_at_asc, created_at_desc, title_asc or title_desc",
    ),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[BlogPostResponse]:
    posts, total = await blogpost_service.list_blogposts(
        db=db, limit=limit or settings.default_page_size, offset=offset, sort=sort
    )
    response.headers["X-Total-Count"] = str(total)
    return posts


@router.post(
    "",
    status_code=201,
    response_model=BlogPostResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        404: {"description": "Creator not found", "model": ErrorResponse},
    },
    summary="Create a blog post",
)
async def create_blogpost(
    body: BlogPostCreate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> BlogPostResponse:
    return await blogpost_service.create_blogpost(db=db, data=body)


@router.get(
    "/search",
    response_model=List[BlogPostResponse],
    responses={400: {"description": "Empty search term", "model": ErrorResponse}},
    summary="Search blog posts by title or content",
)
async def search_blogposts(
    term: str = Query(..., description="Case-insensitive substring"),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[BlogPostResponse]:
    return await blogpost_service.search_blogposts(db=db, term=term)


@router.get(
    "/{post_id}",
    response_model=BlogPostResponse,
    responses=NOT_FOUND,
    summary="Get a single blog post by ID",
)
async def get_blogpost(
    post_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> BlogPostResponse:
    return await blogpost_service.get_blogpost(db=db, post_id=post_id)


@router.put(
    "/{post_id}",
    response_model=BlogPostResponse,
    responses=NOT_FOUND,
    summary="Update a blog post",
)
async def update_blogpost(
    post_id: UUID,
    body: BlogPostUpdate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> BlogPostResponse:
    return await blogpost_service.update_blogpost(db=db, post_id=post_id, data=body)


@router.delete(
    "/{post_id}",
    status_code=204,
    responses=NOT_FOUND,
    summary="Delete a blog post and detach its categories",
)
async def delete_blogpost(
    post_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await blogpost_service.delete_blogpost(db=db, post_id=post_id)
    return Response(status_code=204)


@router.get(
    "/{post_id}/creator",
    response_model=UserResponse,
    responses=NOT_FOUND,
    summary="Get the user who created a blog post",
)
async def get_blogpost_creator(
    post_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> UserResponse:
    return await blogpost_service.get_creator(db=db, post_id=post_id)


@router.get(
    "/{post_id}/categories",
    response_model=List[CategoryResponse],
    responses=NOT_FOUND,
    summary="List a blog post's categories",
)
async def list_blogpost_categories(
    post_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[CategoryResponse]:
    return await blogpost_service.list_categories(db=db, post_id=post_id)


@router.post(
    "/{post_id}/categories/{category_id}",
    status_code=200,
    response_model=BlogPostCategoryResponse,
    responses={404: {"description": "Blog post or category not found", "model": ErrorResponse}},
    summary="Associate a blog post with a category",
    description="Idempotent: associating an already associated pair returns the existing record.",
)
async def add_blogpost_category(
    post_id: UUID,
    category_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> BlogPostCategoryResponse:
    return await blogpost_service.add_category(db=db, post_id=post_id, category_id=category_id)


@router.delete(
    "/{post_id}/categories/{category_id}",
    status_code=204,
    responses={404: {"description": "Association not found", "model": ErrorResponse}},
    summary="Remove a blog post from a category",
)
async def remove_blogpost_category(
    post_id: UUID,
    category_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await blogpost_service.remove_category(db=db, post_id=post_id, category_id=category_id)
    return Response(status_code=204)
