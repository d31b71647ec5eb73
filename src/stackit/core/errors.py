"""Domain errors raised by StackIt services.

Each error carries the HTTP status it maps to and a machine-readable
``reason``; the application exception handler renders them as
``{"reason": ..., "detail": ...}``.
"""

from fastapi import status


class StackItError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason: str = "server_error"
    default_message: str = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(StackItError):
    """Question, answer, user or vote target does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    reason = "not_found"
    default_message = "Resource not found"


class UnauthorizedError(StackItError):
    """Missing or invalid credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "unauthorized"
    default_message = "Could not validate credentials"


class ForbiddenError(StackItError):
    """Authenticated, but neither the owner nor an admin."""

    status_code = status.HTTP_403_FORBIDDEN
    reason = "forbidden"
    default_message = "Not authorized to perform this action"


class InvalidArgumentError(StackItError):
    """Malformed input, rejected before any mutation."""

    status_code = status.HTTP_400_BAD_REQUEST
    reason = "invalid_argument"
    default_message = "Invalid argument"


class ConflictError(StackItError):
    """Concurrent mutation kept failing after every retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    reason = "conflict"
    default_message = "The request conflicted with a concurrent update, please retry"


class SchemaError(RuntimeError):
    """The database schema does not match the ORM models."""
