"""
Blog API Backend - User Service
================================

What:  Business logic for users and the User → BlogPost children lookup.
How:   Builds a SQLAlchemyRepository per call from the request's session and
       returns response schemas, so routes only deal with HTTP details.

Rules enforced here (on top of the database constraints):
    - usernames are unique (checked before insert for a readable 409)
    - a user who still owns blog posts cannot be deleted (409)
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.exceptions import ConflictError, ValidationError
from blogapi.models.blogpost import BlogPost
from blogapi.models.relations import USER_BLOGPOSTS
from blogapi.models.user import User
from blogapi.schemas.blogpost import BlogPostResponse
from blogapi.schemas.user import UserCreate, UserResponse, UserUpdate
from blogapi.services.sql_repository import SQLAlchemyRepository

logger = logging.getLogger(__name__)


class UserService:
    """
    Stateless service; every method receives the request's session.

    Responsibilities:
        - create_user() / get_user() / list_users()
        - update_user() / delete_user()
        - list_blogposts(): children lookup through USER_BLOGPOSTS
    """

    @staticmethod
    def _users(db: AsyncSession) -> SQLAlchemyRepository[User]:
        return SQLAlchemyRepository(db, User, "user")

    async def _ensure_username_free(
        self, db: AsyncSession, username: str, exclude_id: Optional[UUID] = None
    ) -> None:
        stmt = select(User).where(User.username == username)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        if await self._users(db).query(stmt):
            raise ConflictError(
                message=f"Username '{username}' is already taken",
                context={"field": "username"},
            )

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        """
        Create a user from a decoded request body.

        Raises:
            ConflictError: username already in use (→ 409)
            DatabaseError: insert failed (→ 500)
        """
        await self._ensure_username_free(db, data.username)
        user = await self._users(db).create(User(name=data.name, username=data.username))
        return UserResponse.model_validate(user)

    async def get_user(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        user = await self._users(db).get(user_id)
        return UserResponse.model_validate(user)

    async def list_users(
        self, db: AsyncSession, limit: Optional[int] = None, offset: int = 0
    ) -> Tuple[List[UserResponse], int]:
        """All users in creation order, plus the unwindowed total."""
        repo = self._users(db)
        users = await repo.query_all(limit=limit, offset=offset)
        total = await repo.count()
        return [UserResponse.model_validate(u) for u in users], total

    async def update_user(self, db: AsyncSession, user_id: UUID, data: UserUpdate) -> UserResponse:
        values = data.model_dump(exclude_unset=True, exclude_none=True)
        if not values:
            raise ValidationError(message="Provide at least one field to update")

        repo = self._users(db)
        user = await repo.get(user_id)
        if "username" in values and values["username"] != user.username:
            await self._ensure_username_free(db, values["username"], exclude_id=user.id)
        user = await repo.update(user, values)
        return UserResponse.model_validate(user)

    async def delete_user(self, db: AsyncSession, user_id: UUID) -> None:
        """
        Delete a user who owns no blog posts.

        Posts are never removed implicitly; the client must delete or reassign
        them first.
        """
        repo = self._users(db)
        user = await repo.get(user_id)
        owned = await repo.query_related(user, USER_BLOGPOSTS)
        if owned:
            raise ConflictError(
                message=f"User '{user.username}' still owns {len(owned)} blog post(s)",
                context={"user_id": str(user_id), "blogposts": len(owned)},
            )
        await repo.delete(user)

    async def list_blogposts(self, db: AsyncSession, user_id: UUID) -> List[BlogPostResponse]:
        """Children lookup: every post whose user_id equals this user's id."""
        repo = self._users(db)
        user = await repo.get(user_id)
        posts: List[BlogPost] = await repo.query_related(user, USER_BLOGPOSTS)
        logger.debug("User %s has %d blog posts", user_id, len(posts))
        return [BlogPostResponse.model_validate(p) for p in posts]


user_service = UserService()
