"""
Blog API Backend - User Route Handlers
=======================================

What:  /api/users CRUD plus GET /api/users/{id}/blogposts (children lookup).
How:   Extracts path/query/body, delegates to UserService, returns JSON.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.config import settings
from blogapi.database import get_db_session
from blogapi.schemas.blogpost import BlogPostResponse
from blogapi.schemas.common import ErrorResponse
from blogapi.schemas.user import UserCreate, UserResponse, UserUpdate
from blogapi.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List all users",
)
async def list_users(
    response: Response,
    limit: int | None = Query(
        default=None, ge=1, le=settings.max_page_size,
        description="Maximum users to return (defaults to DEFAULT_PAGE_SIZE)",
    ),
    offset: int = Query(default=0, ge=0, description="Users to skip"),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[UserResponse]:
    """
    List users in creation order.

    X-Total-Count carries the unwindowed total so clients can page with
    limit/offset without a second request.
    """
    users, total = await user_service.list_users(
        db=db, limit=limit or settings.default_page_size, offset=offset
    )
    response.headers["X-Total-Count"] = str(total)
    return users


@router.post(
    "",
    status_code=201,
    response_model=UserResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        409: {"description": "Username taken", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> UserResponse:
    return await user_service.create_user(db=db, data=body)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses=NOT_FOUND,
    summary="Get a single user by ID",
)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> UserResponse:
    return await user_service.get_user(db=db, user_id=user_id)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={**NOT_FOUND, 409: {"description": "Username taken", "model": ErrorResponse}},
    summary="Update a user",
)
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> UserResponse:
    return await user_service.update_user(db=db, user_id=user_id, data=body)


@router.delete(
    "/{user_id}",
    status_code=204,
    responses={**NOT_FOUND, 409: {"description": "User still owns blog posts", "model": ErrorResponse}},
    summary="Delete a user that owns no blog posts",
)
async def delete_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> Response:
    await user_service.delete_user(db=db, user_id=user_id)
    return Response(status_code=204)


@router.get(
    "/{user_id}/blogposts",
    response_model=List[BlogPostResponse],
    responses=NOT_FOUND,
    summary="List a user's blog posts",
)
async def list_user_blogposts(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[BlogPostResponse]:
    return await user_service.list_blogposts(db=db, user_id=user_id)
