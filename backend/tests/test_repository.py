"""
Blog API Backend - Repository & Relationship Tests
===================================================

What:  Tests for SQLAlchemyRepository and the relationship descriptors.
How:   Runs against the in-memory SQLite database from conftest; error
       translation is checked with a mock session raising SQLAlchemy errors.

What we test:
    ✅ create → get returns an equal entity
    ✅ get on an unknown id raises NotFoundError
    ✅ query_all ordering and windowing, count
    ✅ Parent / Children / Siblings lookups; Relationship is abstract
    ✅ IntegrityError → ConflictError, other SQLAlchemyError → DatabaseError
"""

import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy.exc import IntegrityError, OperationalError

from blogapi.exceptions import ConflictError, DatabaseError, NotFoundError
from blogapi.models.blogpost import BlogPost
from blogapi.models.category import BlogPostCategoryPivot, Category
from blogapi.models.relations import (
    BLOGPOST_CATEGORIES,
    BLOGPOST_CREATOR,
    CATEGORY_BLOGPOSTS,
    Relationship,
    USER_BLOGPOSTS,
)
from blogapi.models.user import User
from blogapi.services.sql_repository import SQLAlchemyRepository


def repos(session):
    return (
        SQLAlchemyRepository(session, User, "user"),
        SQLAlchemyRepository(session, BlogPost, "blog post"),
        SQLAlchemyRepository(session, Category, "category"),
        SQLAlchemyRepository(session, BlogPostCategoryPivot, "category association"),
    )


class TestRepositoryCrud:

    @pytest.mark.asyncio
    async def test_create_then_get(self, db_session):
        users, *_ = repos(db_session)
        created = await users.create(User(name="Ann", username="ann1"))

        fetched = await users.get(created.id)

        assert fetched.id == created.id
        assert fetched.username == "ann1"
        assert fetched.created_at is not None

    @pytest.mark.asyncio
    async def test_get_unknown_raises_not_found(self, db_session):
        users, *_ = repos(db_session)

        assert await users.find(uuid4()) is None
        with pytest.raises(NotFoundError):
            await users.get(uuid4())

    @pytest.mark.asyncio
    async def test_query_all_and_count(self, db_session):
        _, _, categories, _ = repos(db_session)
        for name in ("rust", "go", "python"):
            await categories.create(Category(name=name))

        everything = await categories.query_all(order_by="name")
        window = await categories.query_all(limit=1, offset=1, order_by="name")

        assert [c.name for c in everything] == ["go", "python", "rust"]
        assert [c.name for c in window] == ["python"]
        assert await categories.count() == 3

    @pytest.mark.asyncio
    async def test_update_and_delete(self, db_session):
        users, *_ = repos(db_session)
        user = await users.create(User(name="Ann", username="ann1"))

        await users.update(user, {"name": "Annie"})
        assert (await users.get(user.id)).name == "Annie"

        await users.delete(user)
        assert await users.find(user.id) is None

    @pytest.mark.asyncio
    async def test_duplicate_username_is_conflict(self, db_session):
        users, *_ = repos(db_session)
        await users.create(User(name="Ann", username="ann1"))

        with pytest.raises(ConflictError):
            await users.create(User(name="Other Ann", username="ann1"))


class TestRepositoryErrorTranslation:

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_conflict(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        )
        repo = SQLAlchemyRepository(mock_db_session, Category, "category")

        with pytest.raises(ConflictError) as exc_info:
            await repo.create(Category(name="python"))

        assert exc_info.value.context["action"] == "create"

    @pytest.mark.asyncio
    async def test_driver_error_becomes_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection lost"))
        )
        repo = SQLAlchemyRepository(mock_db_session, User, "user")

        with pytest.raises(DatabaseError) as exc_info:
            await repo.count()

        assert exc_info.value.context["error_type"] == "OperationalError"


class TestRelationships:

    @pytest.mark.asyncio
    async def test_parent_and_children(self, db_session):
        users, posts, _, _ = repos(db_session)
        ann = await users.create(User(name="Ann", username="ann1"))
        bob = await users.create(User(name="Bob", username="bob1"))
        first = await posts.create(BlogPost(title="One", content="", user_id=ann.id))
        second = await posts.create(BlogPost(title="Two", content="", user_id=ann.id))
        await posts.create(BlogPost(title="Other", content="", user_id=bob.id))

        creator = await posts.query_related(second, BLOGPOST_CREATOR)
        children = await users.query_related(ann, USER_BLOGPOSTS)

        assert [u.id for u in creator] == [ann.id]
        assert {p.id for p in children} == {first.id, second.id}

    @pytest.mark.asyncio
    async def test_siblings_both_directions(self, db_session):
        users, posts, categories, pivots = repos(db_session)
        ann = await users.create(User(name="Ann", username="ann1"))
        post = await posts.create(BlogPost(title="Async IO", content="", user_id=ann.id))
        other = await posts.create(BlogPost(title="Unrelated", content="", user_id=ann.id))
        python = await categories.create(Category(name="python"))
        asyncio_cat = await categories.create(Category(name="asyncio"))

        await pivots.create(BLOGPOST_CATEGORIES.attach(post.id, python.id))
        await pivots.create(BLOGPOST_CATEGORIES.attach(post.id, asyncio_cat.id))

        post_categories = await posts.query_related(post, BLOGPOST_CATEGORIES)
        python_posts = await categories.query_related(python, CATEGORY_BLOGPOSTS)

        # BLOGPOST_CATEGORIES orders by name
        assert [c.name for c in post_categories] == ["asyncio", "python"]
        assert [p.id for p in python_posts] == [post.id]
        assert await posts.query_related(other, BLOGPOST_CATEGORIES) == []

    @pytest.mark.asyncio
    async def test_pivot_lookup_and_pivots_of(self, db_session):
        users, posts, categories, pivots = repos(db_session)
        ann = await users.create(User(name="Ann", username="ann1"))
        post = await posts.create(BlogPost(title="Hello", content="", user_id=ann.id))
        python = await categories.create(Category(name="python"))
        pivot = await pivots.create(BLOGPOST_CATEGORIES.attach(post.id, python.id))

        assert [p.id for p in await pivots.query(BLOGPOST_CATEGORIES.pivot_lookup(post.id, python.id))] == [pivot.id]
        assert await pivots.query(BLOGPOST_CATEGORIES.pivot_lookup(post.id, uuid4())) == []
        assert [p.id for p in await pivots.query(BLOGPOST_CATEGORIES.pivots_of(post.id))] == [pivot.id]

    @pytest.mark.asyncio
    async def test_duplicate_pivot_is_conflict(self, db_session):
        users, posts, categories, pivots = repos(db_session)
        ann = await users.create(User(name="Ann", username="ann1"))
        post = await posts.create(BlogPost(title="Hello", content="", user_id=ann.id))
        python = await categories.create(Category(name="python"))
        await pivots.create(BLOGPOST_CATEGORIES.attach(post.id, python.id))

        with pytest.raises(ConflictError):
            await pivots.create(BLOGPOST_CATEGORIES.attach(post.id, python.id))

    def test_attach_builds_unsaved_pivot(self):
        post_id, category_id = uuid4(), uuid4()

        pivot = BLOGPOST_CATEGORIES.attach(post_id, category_id)
        reverse = CATEGORY_BLOGPOSTS.attach(category_id, post_id)

        assert isinstance(pivot, BlogPostCategoryPivot)
        assert (pivot.blogpost_id, pivot.category_id) == (post_id, category_id)
        assert (reverse.blogpost_id, reverse.category_id) == (post_id, category_id)

    def test_relationship_requires_statement(self):
        class Incomplete(Relationship):
            pass

        with pytest.raises(TypeError):
            Relationship()
        with pytest.raises(TypeError):
            Incomplete()
        assert isinstance(BLOGPOST_CREATOR, Relationship)
