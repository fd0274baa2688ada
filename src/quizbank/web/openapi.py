from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

SECURITY_SCHEME_DESCRIPTIONS = {
    "AccessToken": "Short-lived signed access token returned on signup, login and renewal",
    "RefreshToken": "Opaque refresh token identifying one session, returned on signup and login",
    "AccountId": "ID of the account the refresh token belongs to",
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="QuizBank API",
            version="0.1.0",
            summary="Question papers with access/refresh token authentication",
            routes=app.routes,
        )

        security_schemes = openapi_schema.get("components", {}).get("securitySchemes", {})
        for name, description in SECURITY_SCHEME_DESCRIPTIONS.items():
            if name in security_schemes:
                security_schemes[name]["description"] = description

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")
    reason: str | None = Field(None, description="Authentication failure reason (401 only)")
    retryable: bool | None = Field(None, description="Set when the request may be retried (503 only)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid email or password", "type": "invalid_credentials"},
                {"message": "Refresh token has expired", "type": "authentication_error", "reason": "session_expired"},
                {"message": "Paper not found", "type": "not_found"},
            ]
        }
    }
