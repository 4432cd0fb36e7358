"""Domain exceptions raised by the service layer.

Every exception carries the HTTP status it maps to and an optional dict of
extra response fields. The API layer renders them as ``{"msg": ..., **extra}``.
"""

from typing import Any


class UserServiceError(Exception):
    """Base exception for all user service errors."""

    status_code: int = 500

    def __init__(self, message: str, **extra: Any) -> None:
        self.message = message
        self.extra = extra
        super().__init__(message)

    def to_content(self) -> dict[str, Any]:
        """Return the JSON body for this error."""
        return {"msg": self.message, **self.extra}


class ValidationError(UserServiceError):
    """Raised when required fields are missing or have invalid values."""

    status_code = 400


class ConflictError(UserServiceError):
    """Raised when an email or roll number is already taken."""

    status_code = 400


class NotFoundError(UserServiceError):
    """Raised when a user cannot be found by email, user_id, or roll number."""

    status_code = 404


class AuthError(UserServiceError):
    """Raised when the supplied credentials do not match."""

    status_code = 400


class DependencyError(UserServiceError):
    """Raised when service discovery or the peer service fails during login."""

    status_code = 500


class InternalError(UserServiceError):
    """Raised when the store fails in an unexpected way."""

    status_code = 500
