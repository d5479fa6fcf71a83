"""Error taxonomy shared by every API component.

Each error knows its HTTP status; the application renders all of them as
``{"error": message}``.
"""

from fastapi import status


class ContactDeskError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(ContactDeskError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, message: str | None = None, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class Unauthorized(ContactDeskError):
    """Missing, invalid or expired token, or bad credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Forbidden(ContactDeskError):
    """Authenticated caller does not own the referenced resource."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


class Conflict(ContactDeskError):
    """Uniqueness violation."""

    status_code = status.HTTP_409_CONFLICT
    message = "Resource already exists"


class InternalError(ContactDeskError):
    """Unexpected failure."""
