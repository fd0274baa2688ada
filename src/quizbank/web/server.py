from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from quizbank.app import App
from quizbank.config import Config
from quizbank.errors import TransientStoreError, UserError
from quizbank.web.deps import ACCESS_TOKEN_HEADER, ACCOUNT_ID_HEADER, REFRESH_TOKEN_HEADER
from quizbank.web.error_handlers import (
    general_exception_handler,
    request_validation_error_handler,
    transient_store_error_handler,
    user_error_handler,
)
from quizbank.web.openapi import set_custom_openapi
from quizbank.web.routers import accounts_router, papers_router, questions_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        # Store app instance and config in app state
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="QuizBank API", lifespan=lifespan)

    # Token headers must be readable by browser clients
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[ACCESS_TOKEN_HEADER, REFRESH_TOKEN_HEADER, ACCOUNT_ID_HEADER],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(accounts_router)
    app.include_router(papers_router)
    app.include_router(questions_router)

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(TransientStoreError, transient_store_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
