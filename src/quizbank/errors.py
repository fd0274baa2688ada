from abc import ABC
from enum import StrEnum


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthFailure(StrEnum):
    """Reason tag attached to every authentication failure."""

    MISSING_TOKEN = "missing_token"
    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_EXPIRED = "session_expired"


_AUTH_FAILURE_MESSAGES = {
    AuthFailure.MISSING_TOKEN: "Access token is missing",
    AuthFailure.MISSING_CREDENTIALS: "Refresh token and account id are required",
    AuthFailure.INVALID_OR_EXPIRED_TOKEN: "Access token is invalid or expired",
    AuthFailure.SESSION_NOT_FOUND: "Session not found. Make sure the refresh token and account id are correct",
    AuthFailure.SESSION_EXPIRED: "Refresh token has expired",
}


class AuthenticationError(UserError):
    """Raised when authentication fails.

    The reason is kept for logs and for machine parsing by clients, the
    message is the human-readable part.
    """

    def __init__(self, reason: AuthFailure, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or _AUTH_FAILURE_MESSAGES[reason])


class InvalidCredentialsError(UserError):
    """Raised when login fails. Never tells which of email or password was wrong."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class DuplicateEmailError(UserError):
    """Raised when an account with the same email already exists."""

    def __init__(self, message: str = "An account with this email already exists") -> None:
        super().__init__(message)


class TransientStoreError(Exception):
    """Raised when the database timed out or is unavailable.

    Not a UserError: the cause is internal, but the request may be retried.
    """

    def __init__(self, message: str = "Database is temporarily unavailable") -> None:
        super().__init__(message)
