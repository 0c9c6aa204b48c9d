"""
Blog API Backend - User SQLAlchemy Model
=========================================

What:  ORM model representing the `users` table.
Who:   Used by UserService through the repository, and by Alembic.

Table Design:
    - UUID primary key, assigned by the application on construction
    - username: unique handle; a duplicate insert surfaces as ConflictError
    - A user is the parent side of User → BlogPost (blogposts.user_id)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from blogapi.database import Base


class User(Base):
    """
    Represents an author account.

    Lifecycle:
        1. Created by POST /api/users
        2. Renamed by PUT /api/users/{id}
        3. Deleted by DELETE /api/users/{id}, only once it owns no blog posts
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name",
    )

    username: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Unique login handle",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this user was created (UTC)",
    )

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
