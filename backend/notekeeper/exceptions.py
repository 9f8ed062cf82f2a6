"""
NoteKeeper Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for different error scenarios.
Why:   Global exception handlers (registered in main.py) translate these into
       structured JSON error responses with the right status code, without
       leaking internal details to the client.

Exception Hierarchy:
    NoteKeeperError (base)
    ├── ValidationError              → 400 Bad Request
    ├── AuthenticationError          → 401 Unauthorized (generic message)
    │   └── IdentityResolutionError  → 401 (missing/invalid `Id` claim)
    ├── NotFoundError                → 404 Not Found
    └── DatabaseError                → 500 Internal Server Error

Ownership Note:
    There is deliberately no "forbidden" exception. A note owned by someone
    else is reported exactly like a note that does not exist.
"""

from typing import Any, Dict, Optional


class NoteKeeperError(Exception):
    """
    Base exception for all NoteKeeper application errors.

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


class ValidationError(NoteKeeperError):
    """
    Raised when client input fails a business rule.

    HTTP: 400 Bad Request. Schema-level problems are already rejected by
    FastAPI with 422 before reaching the services.
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


class AuthenticationError(NoteKeeperError):
    """
    Raised when the caller cannot be authenticated.

    HTTP: 401 Unauthorized. The response message is always the same
    generic text; the specific reason (expired, bad signature, missing
    header) is kept in `context` for the server log only.
    """

    def __init__(
        self,
        reason: str = "authentication failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = reason
        super().__init__(message="Authentication failed", context=ctx)
        self.reason = reason


class IdentityResolutionError(AuthenticationError):
    """
    Raised when an authenticated session carries no usable `Id` claim.

    A token we signed ourselves always has one, so this points at a
    configuration or token-issuing bug rather than a user mistake. The
    request never reaches business logic.
    """

    def __init__(self, reason: str, claim_value: Any = None):
        super().__init__(
            reason=reason,
            context={"claim": "Id", "claim_type": type(claim_value).__name__},
        )


class NotFoundError(NoteKeeperError):
    """
    Raised when a requested resource does not exist for this caller.

    HTTP: 404 Not Found. Used for notes owned by other users as well.
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


class DatabaseError(NoteKeeperError):
    """
    Raised when a database read fails unexpectedly.

    HTTP: 500 Internal Server Error. The client gets a generic message; the
    original exception type is kept in `context` for the server log.
    Failed writes do not raise this; they return False to the caller.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
