"""
Tenant Notes Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for each error scenario.
Why:   Targeted error handling with the right HTTP status code and a message
       that is safe to return to the client.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       structured JSON error responses.
Who:   Raised by auth gates, services and repositories; caught by global handlers.

Exception Hierarchy:
    TenantNotesError (base)
    ├── ValidationError        → 400 Bad Request
    ├── AuthenticationError    → 401 Unauthorized
    ├── QuotaExceededError     → 402 Payment Required
    ├── AuthorizationError     → 403 Forbidden
    ├── NotFoundError          → 404 Not Found
    ├── DatabaseError          → 500 Internal Server Error
    └── ConfigurationError     → startup failure (never reaches a client)
"""

from typing import Any, Dict, Optional


class TenantNotesError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TenantNotesError):
    """
    Raised when client input is missing or malformed.

    HTTP: 400 Bad Request
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


class AuthenticationError(TenantNotesError):
    """
    Raised when the caller cannot be identified.

    When:    Missing/invalid/expired bearer token, or bad login credentials.
    HTTP:    401 Unauthorized

    Login failures always use the same message whether the email is unknown
    or the password is wrong, so the response does not reveal which one it was.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(TenantNotesError):
    """
    Raised when an identified caller is not allowed to perform the action.

    When:    Wrong role, or an admin acting on a tenant other than their own.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class QuotaExceededError(TenantNotesError):
    """
    Raised when a tenant's plan does not allow another note.

    HTTP: 402 Payment Required
    """

    def __init__(
        self,
        message: str = "FREE plan limit reached. Upgrade to PRO.",
        limit: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if limit is not None:
            ctx["limit"] = limit
        super().__init__(message=message, context=ctx)
        self.limit = limit


class NotFoundError(TenantNotesError):
    """
    Raised when a requested resource does not exist in the caller's scope.

    HTTP: 404 Not Found

    A note owned by another tenant is reported exactly like a missing note;
    the response never reveals that the id exists elsewhere.
    """

    def __init__(
        self,
        message: str = "Not found",
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(TenantNotesError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP: 500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. Details
        (SQL, constraint names) are logged server-side only.
    """

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(TenantNotesError):
    """Raised at startup when required settings are missing or unsafe."""
