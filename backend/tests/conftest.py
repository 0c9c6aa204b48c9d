"""
Blog API Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment is pointed at SQLite before any blogapi import. Each test
       gets a fresh in-memory database (StaticPool keeps the single connection
       alive), and the API client points get_db_session at it.

Fixtures:
    ├── mock_db_session:  AsyncMock session for service unit tests (no DB)
    ├── db_engine:        In-memory SQLite engine with all tables created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db_session:       One AsyncSession for repository/service tests
    └── test_client:      HTTPX AsyncClient talking to the FastAPI app
"""

import os

# Must happen before blogapi.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from blogapi.database import Base  # noqa: E402
from blogapi.models.blogpost import BlogPost  # noqa: E402,F401
from blogapi.models.category import BlogPostCategoryPivot, Category  # noqa: E402,F401
from blogapi.models.user import User  # noqa: E402,F401


# ══════════════════════════════════════════════════════════════════════════
# Mocked Session (no database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.get.return_value = user
        result = await user_service.get_user(mock_db_session, user.id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


def scalars_result(items):
    """Build the object `await session.execute(...)` returns for a scalars() query."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(items)
    return result


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


# ══════════════════════════════════════════════════════════════════════════
# Real Session (in-memory SQLite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory, monkeypatch):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    The real get_db_session runs; only its session factory is swapped for one
    bound to the per-test SQLite database.
    """
    from blogapi.main import app

    monkeypatch.setattr("blogapi.database.async_session_factory", session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# API helpers
# ══════════════════════════════════════════════════════════════════════════

async def create_user(client, name="Ann", username="ann1"):
    response = await client.post("/api/users", json={"name": name, "username": username})
    assert response.status_code == 201, response.text
    return response.json()


async def create_blogpost(client, user_id, title="Hello", content="First post"):
    response = await client.post(
        "/api/blogposts",
        json={"title": title, "content": content, "user_id": user_id},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def create_category(client, name="Python"):
    response = await client.post("/api/categories", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()
