"""
Postboard Backend - Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the error scenarios of the site.
How:   Each exception class carries a user-facing message and an optional
       context dict. Page routes catch these and render the message on a
       view; JSON routes let them reach the global handlers in main.py,
       which answer {"error": <message>} with the mapped HTTP status.
Who:   Raised by services and the session store.

Exception Hierarchy:
    PostboardError (base)
    ├── ValidationError          → 400 Bad Request
    ├── UsernameTakenError       → 409 Conflict (rendered on the register page)
    ├── NotFoundError            → 404 Not Found
    ├── InvalidCredentialsError  → 401 Unauthorized (rendered on the login page)
    ├── UnauthenticatedError     → 401 Unauthorized
    └── StoreError               → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class PostboardError(Exception):
    """
    Base exception for all Postboard application errors.

    Attributes:
        message:  User-facing error description (safe to render or return)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PostboardError):
    """
    Raised when a required field is missing or empty.

    When:    Empty username/password on registration, blank comment text.
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


class UsernameTakenError(PostboardError):
    """A users row with the requested username already exists."""

    status_code = 409

    def __init__(self, username: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["username"] = username
        super().__init__(
            message="There is already a user with that username",
            context=ctx,
        )
        self.username = username


class NotFoundError(PostboardError):
    """
    Raised when a requested user or post does not exist.

    The `resource` attribute lets a page route pick the right view: a missing
    user renders the profile error page, a missing post the generic one.
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
                message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class InvalidCredentialsError(PostboardError):
    """Password did not match the stored hash."""

    status_code = 401

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Incorrect username or password.", context=context)


class UnauthenticatedError(PostboardError):
    """
    Raised when an operation needs a logged-in session and there is none.

    HTTP:    401 Unauthorized (JSON routes); page routes render a view instead.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "You are not logged in.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreError(PostboardError):
    """
    Raised when the database or the session store fails an operation.

    The message is always generic; the underlying error type and identifiers
    go to `context`, which is logged server-side only.
    HTTP:    500 Internal Server Error
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
