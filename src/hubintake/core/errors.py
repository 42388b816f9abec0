"""Error handling module for hub-intake.

This module defines error codes, exception classes, and response models.

Error Response Format:
{
    "error": {
        "code": "NO_ACTIVE_SESSION",
        "message": "Hub has no active session"
    }
}

Error kinds:
- NotFound: HubNotFoundError, NoSessionEverError, NoItemError, NoItemsInRangeError
- Conflict: SessionAlreadyOpenError, NoActiveSessionError
- InvalidRange: PageOutOfRangeError
- Upstream: UpstreamError (collaborator failure, wraps the cause)

Usage:
    from hubintake.core.errors import HubNotFoundError, NoActiveSessionError

    # Raise with default message
    raise NoActiveSessionError()

    # Raise with custom message
    raise HubNotFoundError(f"Hub {hub_id} not found")
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    HUB_NOT_FOUND = "HUB_NOT_FOUND"
    NO_SESSION_EVER = "NO_SESSION_EVER"
    NO_ITEM = "NO_ITEM"
    NO_ITEMS_IN_RANGE = "NO_ITEMS_IN_RANGE"
    SESSION_ALREADY_OPEN = "SESSION_ALREADY_OPEN"
    NO_ACTIVE_SESSION = "NO_ACTIVE_SESSION"
    PAGE_OUT_OF_RANGE = "PAGE_OUT_OF_RANGE"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    """Error detail containing code and message."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response format."""

    error: ErrorDetail


class IntakeError(Exception):
    """Base exception for hub-intake.

    All hub-intake specific exceptions should inherit from this class.
    This enables centralized exception handling in FastAPI.

    Attributes:
        code: The error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code to return
    """

    def __init__(self, code: ErrorCode, message: str, status_code: int) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse model."""
        return ErrorResponse(
            error=ErrorDetail(code=self.code.value, message=self.message)
        )


class InvalidRequestError(IntakeError):
    """400 Bad Request - Invalid request parameters."""

    def __init__(self, message: str = "Invalid request") -> None:
        super().__init__(ErrorCode.INVALID_REQUEST, message, 400)


# =============================================================================
# NotFound
# =============================================================================


class NotFoundError(IntakeError):
    """Referenced entity does not exist or nothing matches a query."""


class HubNotFoundError(NotFoundError):
    """400 Bad Request - Hub does not exist."""

    def __init__(self, message: str = "Hub not found") -> None:
        super().__init__(ErrorCode.HUB_NOT_FOUND, message, 400)


class NoSessionEverError(NotFoundError):
    """400 Bad Request - Hub has never had an intake session."""

    def __init__(self, message: str = "Hub has no intake sessions") -> None:
        super().__init__(ErrorCode.NO_SESSION_EVER, message, 400)


class NoItemError(NotFoundError):
    """400 Bad Request - Active session holds no items."""

    def __init__(self, message: str = "Active session has no items") -> None:
        super().__init__(ErrorCode.NO_ITEM, message, 400)


class NoItemsInRangeError(NotFoundError):
    """400 Bad Request - No items were registered in the requested window."""

    def __init__(self, message: str = "No items in the requested time range") -> None:
        super().__init__(ErrorCode.NO_ITEMS_IN_RANGE, message, 400)


# =============================================================================
# Conflict
# =============================================================================


class ConflictError(IntakeError):
    """Operation violates a session lifecycle invariant."""


class SessionAlreadyOpenError(ConflictError):
    """400 Bad Request - Hub already has an active session."""

    def __init__(self, message: str = "Hub already has an active session") -> None:
        super().__init__(ErrorCode.SESSION_ALREADY_OPEN, message, 400)


class NoActiveSessionError(ConflictError):
    """400 Bad Request - Hub's latest session is closed."""

    def __init__(self, message: str = "Hub has no active session") -> None:
        super().__init__(ErrorCode.NO_ACTIVE_SESSION, message, 400)


# =============================================================================
# InvalidRange
# =============================================================================


class InvalidRangeError(IntakeError):
    """Caller-supplied window exceeds the available data."""


class PageOutOfRangeError(InvalidRangeError):
    """400 Bad Request - Page offset is past the last qualifying hub."""

    def __init__(self, message: str = "Page is out of range") -> None:
        super().__init__(ErrorCode.PAGE_OUT_OF_RANGE, message, 400)


# =============================================================================
# Upstream
# =============================================================================


class UpstreamError(IntakeError):
    """500 Internal Server Error - A store call failed.

    The cause is chained via ``raise ... from``; it is not interpreted here.

    Attributes:
        operation: Store operation that failed (e.g. "get_current_session")
        context: Identifiers useful for logging (hub_id, session_id, ...)
    """

    def __init__(self, operation: str, **context: Any) -> None:
        self.operation = operation
        self.context = context
        details = ", ".join(f"{k}={v}" for k, v in context.items())
        message = f"Store operation '{operation}' failed"
        if details:
            message = f"{message} ({details})"
        super().__init__(ErrorCode.UPSTREAM_ERROR, message, 500)


class InternalError(IntakeError):
    """500 Internal Server Error - Unexpected error."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(ErrorCode.INTERNAL_ERROR, message, 500)
