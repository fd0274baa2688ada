from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from quizbank.config import Config

if TYPE_CHECKING:
    from quizbank.core.modules.access.service import AccessService
    from quizbank.core.modules.account.service import AccountService
    from quizbank.core.modules.paper.service import PaperService
    from quizbank.core.modules.question.service import QuestionService
    from quizbank.core.modules.session.service import SessionService
    from quizbank.core.modules.token.service import TokenService


class Service:
    """Base class for services with direct database access and the application config."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]], config: Config) -> None:
        self.database = database
        self.config = config
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    account: AccountService
    session: SessionService
    token: TokenService
    access: AccessService
    paper: PaperService
    question: QuestionService

    def __init__(self, database: AsyncDatabase[dict[str, Any]], config: Config) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for initialization - account must be first
        service_configs = [
            ("account", "quizbank.core.modules.account.service", "AccountService"),
            ("session", "quizbank.core.modules.session.service", "SessionService"),
            ("token", "quizbank.core.modules.token.service", "TokenService"),
            ("access", "quizbank.core.modules.access.service", "AccessService"),
            ("paper", "quizbank.core.modules.paper.service", "PaperService"),
            ("question", "quizbank.core.modules.question.service", "QuestionService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database, config)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]] | None
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        """Initialize core with config, MongoDB, and auto-register services.

        A ready database can be passed in; the core then owns no client.
        """
        self.config = config
        if database is None:
            self.mongo_client = AsyncMongoClient(
                config.database_url,
                uuidRepresentation="standard",
                tz_aware=True,
                timeoutMS=config.database_timeout_ms,
            )
            self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        else:
            self.mongo_client = None
            self.database = database
        self.services = Services(self.database, config)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
