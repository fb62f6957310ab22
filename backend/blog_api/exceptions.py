"""
Blog API Backend — Exception Hierarchy
=======================================

What:  Defines the two closed exception families used by the application.
Why:   Store failures and API failures are different vocabularies. The gateway
       speaks in StoreFault subclasses; the HTTP layer speaks in BlogApiError
       subclasses that know their status code and response envelope.
How:   The error mapper (services/error_mapper.py) converts the first family
       into the second by exception type. Exception handlers registered in
       main.py render BlogApiError instances as JSON.
Who:   Gateways raise StoreFault; BlogService raises BlogApiError.

Exception Hierarchy:
    StoreFault (base, unclassified store failure)
    ├── StoreValidationFault     field rules violated at the store
    └── IdentifierFormatFault    id is not in the store's canonical format

    BlogApiError (base)
    ├── InputValidationError     → 400 required fields missing (pre-store)
    ├── StoreValidationError     → 400 "Validation Error" + details
    ├── InvalidIdentifierError   → 400 "Invalid blog ID format"
    ├── BlogNotFoundError        → 404 "Blog post not found"
    └── ServerError              → 500 "Server error" + message
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


# ══════════════════════════════════════════════════════════════════════════
# Store Faults — raised by persistence gateways
# ══════════════════════════════════════════════════════════════════════════


class StoreFault(Exception):
    """
    Base class for persistence gateway failures.

    Raised directly for anything the gateway cannot classify: lost
    connections, driver errors, failed commits. Carries the original
    exception type in `context` for server-side logging.
    """

    def __init__(
        self,
        message: str = "The data store could not complete the operation",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class StoreValidationFault(StoreFault):
    """
    Raised when a candidate document violates the post field rules.

    `errors` holds one human-readable message per violated constraint,
    in field order.
    """

    def __init__(self, errors: List[str], context: Optional[Dict[str, Any]] = None):
        super().__init__(message="; ".join(errors) or "Validation failed", context=context)
        self.errors = list(errors)


class IdentifierFormatFault(StoreFault):
    """Raised when a client-supplied id cannot be parsed as a store key."""

    def __init__(self, value: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["value"] = value
        super().__init__(message=f"'{value}' is not a valid identifier", context=ctx)
        self.value = value


# ══════════════════════════════════════════════════════════════════════════
# API Errors — raised by resource handlers, rendered by main.py
# ══════════════════════════════════════════════════════════════════════════


class BlogApiError(Exception):
    """
    Base class for errors that map to a response envelope.

    Attributes:
        status_code: HTTP status for the response
        error:       Value of the envelope's `error` field
        message:     Optional envelope `message` field
        details:     Optional envelope `details` list
    """

    status_code: int = 500
    error: str = "Server error"

    def __init__(
        self,
        error: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[List[str]] = None,
    ):
        if error is not None:
            self.error = error
        self.message = message
        self.details = details
        super().__init__(self.error)

    def to_envelope(self) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {"success": False, "error": self.error}
        if self.message is not None:
            envelope["message"] = self.message
        if self.details is not None:
            envelope["details"] = self.details
        return envelope


class InputValidationError(BlogApiError):
    """Required input missing; detected before any store interaction."""

    status_code = 400
    error = "Validation Error"


class StoreValidationError(BlogApiError):
    """Field constraints violated at the store layer."""

    status_code = 400
    error = "Validation Error"

    def __init__(self, details: List[str]):
        super().__init__(details=details)


class InvalidIdentifierError(BlogApiError):
    status_code = 400
    error = "Invalid blog ID format"


class BlogNotFoundError(BlogApiError):
    status_code = 404
    error = "Blog post not found"


class ServerError(BlogApiError):
    """
    Unclassified failure inside a handler.

    The message is the store fault's own text, which never contains
    connection credentials (see StoreFault wrapping in the gateways).
    """

    status_code = 500
    error = "Server error"

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message=message)


def internal_error_envelope(exc: Exception, development: bool) -> Dict[str, Any]:
    """
    Envelope for a fault no handler classified.

    The fault text is shown only in development; production clients get a
    fixed message.
    """
    return {
        "success": False,
        "error": "Internal server error",
        "message": str(exc) if development else "Something went wrong",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
