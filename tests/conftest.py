"""Shared pytest fixtures."""

from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from fakes import FakeDatabase
from fastapi.testclient import TestClient

from quizbank.app import App
from quizbank.config import Config
from quizbank.core.core import Core
from quizbank.web.server import create_fastapi_app

TEST_SECRET = "test-secret-0123456789-abcdefghijklmnop"


@pytest.fixture
def config():
    """Config with low bcrypt cost for fast tests."""
    return Config(
        database_url="mongodb://localhost:27017/quizbank_test",
        host="127.0.0.1",
        port=8000,
        debug=True,
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
    )


@pytest.fixture
def database():
    """Empty in-memory database."""
    return FakeDatabase()


@pytest_asyncio.fixture
async def core(config, database) -> AsyncIterator[Core]:
    """Started core backed by the in-memory database."""
    core = Core(config, database)
    async with core.lifespan():
        yield core


@pytest.fixture
def client(config, database) -> Iterator[TestClient]:
    """HTTP client for the full application."""
    app = App(config, database)
    with TestClient(create_fastapi_app(app, config)) as test_client:
        yield test_client


@pytest.fixture
def accounts(database):
    """The raw accounts collection, for inspecting stored sessions."""
    return database.get_collection("accounts")
