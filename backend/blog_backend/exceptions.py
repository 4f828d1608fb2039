"""
Blog Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions, one per error category of the API.
How:   Each exception carries a user-facing message, the HTTP status it maps
       to, and an optional context dict. Global exception handlers
       (registered in main.py) turn them into `{code, message, data: null}`
       JSON bodies.
Who:   Raised by guards and services; caught by global handlers.

Exception Hierarchy:
    BlogPlatformError (base)     → 500 Internal Server Error
    ├── ValidationError          → 400 Bad Request
    ├── UnauthorizedError        → 401 Unauthorized
    │   └── InvalidTokenError    → 401 (bad signature, malformed, expired)
    ├── ForbiddenError           → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── FileStorageError         → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error

The `context` dict is logged server-side only. It is never part of the
response body.
"""

from typing import Any, Dict, Optional


class BlogPlatformError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:      User-facing error description (safe to return in API response)
        context:      Additional debug info (logged but NOT returned to client)
        status_code:  HTTP status the global handler responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogPlatformError):
    """
    Raised when client input fails a business rule.

    When:    Password confirmation mismatch, bad page/size, status outside
             {0, 1, 2}, disallowed file type, oversized upload.
    HTTP:    400 Bad Request
    """

    status_code = 400

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


class UnauthorizedError(BlogPlatformError):
    """
    Raised when the caller's identity cannot be established.

    When:    Missing/malformed Authorization header, invalid or expired token,
             or a token whose subject no longer resolves to an active user.
    HTTP:    401 Unauthorized
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Not logged in, please obtain a token first",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTokenError(UnauthorizedError):
    """Raised by TokenService.verify for any token it refuses to accept."""

    def __init__(
        self,
        message: str = "Token invalid or expired",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(BlogPlatformError):
    """
    Raised when an authenticated caller lacks the permission for an action.

    When:    Role below the route's required role, non-author updating a blog,
             disabled account logging in.
    HTTP:    403 Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Insufficient permission",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BlogPlatformError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that None
    into this exception so the handler can answer 404.
    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(BlogPlatformError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Registering a username that is already taken.
    HTTP:    409 Conflict
    """

    status_code = 409

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(BlogPlatformError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not readable, I/O error.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BlogPlatformError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. SQL text and
    constraint names are logged server-side only.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
