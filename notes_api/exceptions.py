"""
Notes API - Custom Exception Hierarchy
======================================

What:  Application-specific exceptions for each error outcome.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON
       error responses with the matching HTTP status code.
Who:   Raised by services, repositories, auth dependencies and the list-query
       validation step; caught by the handlers in main.py.

Exception Hierarchy:
    NotesAPIError (base)
    ├── ValidationError    → 400 Bad Request (client must fix and resend)
    ├── UnauthorizedError  → 401 Unauthorized (missing/invalid credential)
    ├── ForbiddenError     → 403 Forbidden (credential lacks a scope)
    ├── NotFoundError      → 404 Not Found
    ├── ConflictError      → 409 Conflict (store uniqueness violation)
    └── DatabaseError      → 500 Internal Server Error

Malformed pagination cursors are deliberately absent from this list: they
degrade to "no cursor" in the codec instead of raising.
"""

from typing import Any, Dict, Iterable, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional info; returned as `details` for client errors,
                  logged only for server errors
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAPIError):
    """
    Raised when client input fails validation.

    When:    Out-of-range limit, malformed tag filters, bad request bodies.
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


class UnauthorizedError(NotesAPIError):
    """
    Raised when a protected route is called without a usable bearer token.

    HTTP:    401 Unauthorized, with `WWW-Authenticate: Bearer`
    """

    def __init__(
        self,
        message: str = "Missing or invalid bearer token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(NotesAPIError):
    """
    Raised when a valid credential does not carry every required scope.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        required: Iterable[str] = (),
        context: Optional[Dict[str, Any]] = None,
    ):
        self.required = sorted(required)
        ctx = context or {}
        ctx["required_scopes"] = self.required
        super().__init__(message="Insufficient scope for this operation", context=ctx)


class NotFoundError(NotesAPIError):
    """
    Raised when a requested resource does not exist.

    The repository returns None/False for unknown ids; the service layer
    converts that into this exception so routes never see a bare sentinel.

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
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(NotesAPIError):
    """
    Raised when the store reports a uniqueness violation.

    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The resource conflicts with an existing one",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(NotesAPIError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The context
        (exception type, operation) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
