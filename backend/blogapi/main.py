"""
Blog API Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn blogapi.main:app) and by `python -m blogapi`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Rate Limit  │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌────────────┐ ┌────────────┐ ┌─────┐ │
    │  │ /users   │ │ /blogposts │ │ /categories│ │/hlth│ │
    │  └──────────┘ └────────────┘ └────────────┘ └─────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Decode→400 │ NotFound→404 │ Conflict→409     │   │
    │  │ DB→500     │ Unexpected→500                  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → production config check → wait for database
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from blogapi import __version__
from blogapi.config import settings
from blogapi.database import dispose_engine, wait_for_database
from blogapi.exceptions import (
    BlogApiError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from blogapi.middleware.logging import RequestLoggingMiddleware
from blogapi.middleware.rate_limit import RateLimitMiddleware
from blogapi.middleware.request_id import RequestIDMiddleware, request_id_var
from blogapi.routes import blogposts, categories, health, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Blog API %s starting up (%s)...", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    try:
        await wait_for_database()
    except Exception as e:
        # Keep serving; /health reports the database as disconnected
        logger.error("Database unreachable after retries: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Blog API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    # request.state survives into the outermost error middleware; the
    # ContextVar is reset once RequestIDMiddleware returns.
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def _error_body(request: Request, error: str, message: str, details: Any = None) -> Dict[str, Any]:
    return {
        "error": error,
        "message": message,
        "details": details,
        "request_id": _request_id(request),
    }


def _summarize_validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError  → 400 decode_error (body) / 404 (bad path id) / 400 (query)
        ValidationError         → 400 Bad Request
        NotFoundError           → 404 Not Found
        ConflictError           → 409 Conflict
        RateLimitExceededError  → 429 Too Many Requests
        DatabaseError           → 500 Internal Server Error
        BlogApiError (base)     → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    Handlers never expose stack traces or SQL; those are logged server-side.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = _summarize_validation_errors(exc)
        sources = {err["loc"][0] for err in errors if err["loc"]}

        if sources == {"path"}:
            # An id that cannot be parsed cannot name an existing entity
            return JSONResponse(
                status_code=404,
                content=_error_body(request, "not_found", "The requested resource was not found", {"errors": errors}),
            )

        if "body" in sources:
            logger.warning("[%s] Malformed request body: %s", _request_id(request), errors)
            return JSONResponse(
                status_code=400,
                content=_error_body(request, "decode_error", "The request body could not be decoded", {"errors": errors}),
            )

        return JSONResponse(
            status_code=400,
            content=_error_body(request, "validation_error", "Invalid request parameters", {"errors": errors}),
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "validation_error", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body(request, "not_found", exc.message),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.info("[%s] Conflict: %s", _request_id(request), exc.message)
        return JSONResponse(
            status_code=409,
            content=_error_body(request, "conflict", exc.message, exc.context),
        )

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return JSONResponse(
            status_code=429,
            content=_error_body(request, "rate_limit_exceeded", exc.message, exc.context),
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s", _request_id(request), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(BlogApiError)
    async def handle_app_error(request: Request, exc: BlogApiError):
        logger.error("[%s] Unhandled application error: %s | Context: %s", _request_id(request), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request,
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Blog API",
        description=(
            "REST API for users, blog posts and categories. Blog posts belong to one "
            "creator and can be filed under any number of categories."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition: the last one added
    # (RateLimit) sees the request first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "X-Total-Count",
            "Retry-After",
        ],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(users.router)
    app.include_router(blogposts.router)
    app.include_router(categories.router)
    app.include_router(health.router)

    return app


# uvicorn expects `blogapi.main:app` to be importable
app = create_app()
