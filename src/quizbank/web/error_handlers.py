import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from quizbank.errors import (
    AuthenticationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, **extra: Any
) -> JSONResponse:
    """Create JSON error response with optional type and extra fields for machine parsing."""
    content: dict[str, Any] = {"message": message}
    if error_type:
        content["type"] = error_type
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    extra: dict[str, Any] = {}
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
        extra["reason"] = exc.reason.value
    elif isinstance(exc, InvalidCredentialsError):
        status_code = 400
        error_type = "invalid_credentials"
    elif isinstance(exc, DuplicateEmailError):
        status_code = 400
        error_type = "duplicate_email"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, **extra)


async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> Response:
    """Malformed request bodies, headers, or path parameters (400)."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return create_json_error_response(status_code=400, message=f"Invalid request: {details}", error_type="validation_error")


async def transient_store_error_handler(_: Request, exc: Exception) -> Response:
    """Database timeouts and outages (503), safe for the client to retry."""
    return create_json_error_response(
        status_code=503, message=str(exc), error_type="transient_store_failure", retryable=True
    )


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
