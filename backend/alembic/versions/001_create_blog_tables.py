"""Create users, blogposts, categories and blogpost_category_pivot tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema for the blog API.
How:   PostgreSQL UUID primary keys with gen_random_uuid() defaults,
       TIMESTAMP WITH TIME ZONE columns, foreign keys for both relationships.

Rollback: downgrade() drops all four tables (destructive).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
        comment="Unique identifier",
    )


def _created_at_column(comment: str) -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
        comment=comment,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=False, comment="Display name"),
        sa.Column("username", sa.String(64), nullable=False, comment="Unique login handle"),
        _created_at_column("When this user was created (UTC)"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "blogposts",
        _id_column(),
        sa.Column("title", sa.String(255), nullable=False, comment="Post title"),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Post body",
        ),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            comment="Creator of the post (users.id)",
        ),
        _created_at_column("When this post was created (UTC)"),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this post was last modified (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
        # RESTRICT: a user with posts cannot be deleted out from under them
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
    )
    op.create_index("idx_blogposts_user_id", "blogposts", ["user_id"])

    op.create_table(
        "categories",
        _id_column(),
        sa.Column("name", sa.String(100), nullable=False, comment="Unique category name"),
        _created_at_column("When this category was created (UTC)"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )

    op.create_table(
        "blogpost_category_pivot",
        _id_column(),
        sa.Column(
            "blogpost_id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            comment="Associated blog post (blogposts.id)",
        ),
        sa.Column(
            "category_id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            comment="Associated category (categories.id)",
        ),
        _created_at_column("When the association was made (UTC)"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["blogpost_id"], ["blogposts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("blogpost_id", "category_id", name="uq_blogpost_category"),
    )
    op.create_index("idx_pivot_blogpost_id", "blogpost_category_pivot", ["blogpost_id"])
    op.create_index("idx_pivot_category_id", "blogpost_category_pivot", ["category_id"])


def downgrade() -> None:
    """Drop every table in reverse dependency order. All data is lost."""
    op.drop_index("idx_pivot_category_id", table_name="blogpost_category_pivot")
    op.drop_index("idx_pivot_blogpost_id", table_name="blogpost_category_pivot")
    op.drop_table("blogpost_category_pivot")
    op.drop_table("categories")
    op.drop_index("idx_blogposts_user_id", table_name="blogposts")
    op.drop_table("blogposts")
    op.drop_table("users")
