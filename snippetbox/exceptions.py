"""
Snippetbox — Custom Exception Hierarchy
=========================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       responses. Services raise them; global handlers (registered in main.py)
       or route handlers translate them.
How:   Each exception class carries a message and optional context dict.

Exception Hierarchy:
    SnippetboxError (base)
    ├── NoRecordError             → 404 Not Found
    ├── DuplicateEmailError       → form error on signup
    ├── InvalidCredentialsError   → form error on login
    └── AuthenticationRequired    → 303 redirect to /user/login

Database driver errors are NOT wrapped: they propagate to the
catch-all handler, which logs them and answers 500.
"""

from typing import Any, Dict, Optional


class SnippetboxError(Exception):
    """
    Base exception for all Snippetbox application errors.

    Attributes:
        message:  User-facing error description
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


class NoRecordError(SnippetboxError):
    """
    Raised when no matching record exists.

    What:    The "no record" sentinel for the data-access layer.
    When:    A snippet id that doesn't exist, or whose snippet has expired.
    HTTP:    404 Not Found

    SQLAlchemy returns None for a missing row rather than raising; services
    convert that None into this exception so routes never inspect driver results.
    """

    def __init__(
        self,
        resource: str = "record",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"No matching {resource} found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DuplicateEmailError(SnippetboxError):
    """Raised when signing up with an email address that is already registered."""

    def __init__(self, email: str = "", context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Email address is already in use", context=context)
        self.email = email


class InvalidCredentialsError(SnippetboxError):
    """
    Raised when a login attempt fails.

    Unknown email and wrong password raise the same error so responses
    don't reveal which accounts exist.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Email or password is incorrect", context=context)


class AuthenticationRequired(SnippetboxError):
    """
    Raised by the require_authentication dependency for anonymous requests.

    HTTP: 303 See Other → /user/login
    """

    def __init__(self, path: str = "", context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message="You must be logged in to view this page", context=ctx)
