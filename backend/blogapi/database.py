"""
Blog API Backend - Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       FastAPI session dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Route handlers via FastAPI's dependency injection; Alembic via `Base`.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite (tests, local experiments) gets none of these; its async driver
    does not use a sized pool.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from blogapi.config import settings
from blogapi.exceptions import DatabaseError

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Keyword arguments for create_async_engine() appropriate to the driver.

    SQL echo follows DEBUG logging so queries are visible during development.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        return options

    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, so handlers
# can serialize entities without another round trip.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models share this metadata, which Alembic reads for migrations and
    the test suite uses for create_all().
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On error: rolls back the transaction and re-raises
        4. On success: commits; a failed commit rolls back and raises
           DatabaseError (→ 500)
        5. Always: closes the session (returns connection to pool)

    Routes must declare it with scope="function" so the commit finishes
    before the response is sent:
        @router.get("/users")
        async def list_users(db: AsyncSession = Depends(get_db_session, scope="function")):
            return await user_service.list_users(db)
    """
    async with async_session_factory() as session:
        try:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise  # The global error handler builds the response

            try:
                await session.commit()
            except SQLAlchemyError as e:
                logger.error("Commit failed: %s", str(e), exc_info=True)
                await session.rollback()
                raise DatabaseError(
                    context={"action": "commit", "error_type": type(e).__name__},
                ) from e
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def wait_for_database() -> None:
    """
    Block until the database answers `SELECT 1`.

    What:  Startup connectivity check run from the lifespan handler.
    How:   Tenacity retries connection failures with exponential backoff and
           jitter, up to DB_CONNECT_RETRY_ATTEMPTS attempts. The last error is
           re-raised once attempts are exhausted.
    """
    retryer = AsyncRetrying(
        retry=retry_if_exception_type((DBAPIError, OSError)),
        stop=stop_after_attempt(settings.db_connect_retry_attempts),
        wait=wait_exponential_jitter(
            multiplier=settings.db_connect_retry_wait,
            max=settings.db_connect_retry_wait * 8,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retryer:
        with attempt:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
    logger.info("Database connection established")


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
