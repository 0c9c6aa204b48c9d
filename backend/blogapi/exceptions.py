"""
Blog API Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the failure modes of a CRUD request.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by repositories, services and middleware; caught by global handlers.

Exception Hierarchy:
    BlogApiError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

    Malformed request bodies never reach these classes: FastAPI raises its own
    RequestValidationError, which main.py maps to a 400 `decode_error`.
"""

from typing import Any, Dict, Optional


class BlogApiError(Exception):
    """
    Base exception for all Blog API application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only where the handler says so)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogApiError):
    """
    Raised when client input fails a business rule.

    When:    Empty search term, update with no fields, and similar checks that
             pydantic cannot express on its own.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BlogApiError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/users/{id} with an unknown id, a blog post that names a
             user who does not exist, detaching a category that was never attached.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the repository converts that
    into this exception so services never deal with None for required lookups.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(BlogApiError):
    """
    Raised when a write would violate a uniqueness or ownership rule.

    When:    Duplicate username or category name, deleting a user who still
             owns blog posts.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The request conflicts with the current state of the resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BlogApiError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, deadlock, driver errors.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(BlogApiError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header.
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
