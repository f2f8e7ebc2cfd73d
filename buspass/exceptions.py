"""
Bus Pass Backend - Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    BusPassError (base)
    ├── InvalidRouteError        → 400 Bad Request (no matching location edge)
    ├── ValidationError          → 400 Bad Request (rejected photo upload)
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── FileStorageError         → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error

Only two kinds of failure reach a client: input errors (4xx) that the client
can fix by changing its request, and backend faults (500) whose underlying
error text is passed through in the `error` field of the response.
"""

from typing import Any, Dict, Optional


class BusPassError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = dict(context or {})
        super().__init__(self.message)


class InvalidRouteError(BusPassError):
    """
    Raised when no location edge matches a (source, destination) pair.

    HTTP:    400 Bad Request
    Body:    {"error": "Invalid source or destination"}

    This is a client-input error: the pair was not offered by GET /api/locations.
    """

    def __init__(
        self,
        source: Optional[str] = None,
        destination: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        ctx.update({"source": source, "destination": destination})
        super().__init__(message="Invalid source or destination", context=ctx)
        self.source = source
        self.destination = destination


class ValidationError(BusPassError):
    """
    Raised when client input fails validation.

    When:    Photo extension not allowed, file too large, empty upload.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "File type '.pdf' is not supported. Allowed types: .gif, .jpeg, ...",
            "details": {"field": "photo", "extension": ".pdf"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BusPassError):
    """
    Raised when a requested resource does not exist.

    When:    GET /bus-pass/{id} with an unknown UUID, or GET /uploads/{name}
             for a photo that was never stored.
    HTTP:    404 Not Found
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
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class BackendFault(BusPassError):
    """
    Base for failures of the backing store or file system.

    Attributes:
        message:  Operation-level description ("Failed to create bus pass")
        error:    Text of the underlying exception, passed through to the caller

    HTTP:    500 Internal Server Error
    Body:    {"message": message, "error": error}
    """

    def __init__(
        self,
        message: str = "An internal error occurred",
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.error = error if error is not None else message


class FileStorageError(BackendFault):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable, I/O error.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, error=error, context=context)


class DatabaseError(BackendFault):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, constraint violation, a value the
             store cannot cast (e.g. an unparseable validTill date).
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, error=error, context=context)


class RateLimitExceededError(BusPassError):
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
        ctx = dict(context or {})
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
