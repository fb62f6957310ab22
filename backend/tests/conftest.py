"""
Blog API Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── clock: Deterministic clock, one second later on every call
    ├── memory_gateway: InMemoryPostGateway driven by `clock`
    ├── test_settings: Settings for an app under test (memory backend)
    ├── test_app: FastAPI app with the gateway dependency overridden
    └── test_client: HTTPX AsyncClient talking to `test_app`
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from blog_api.config import Settings  # noqa: E402
from blog_api.main import create_app  # noqa: E402
from blog_api.routes.dependencies import get_post_gateway  # noqa: E402
from blog_api.services.memory_gateway import InMemoryPostGateway  # noqa: E402


class FakeClock:
    """Returns strictly increasing UTC datetimes, one second apart."""

    def __init__(self, start: datetime = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_gateway(clock):
    return InMemoryPostGateway(clock=clock)


@pytest.fixture
def valid_post():
    """A create payload that satisfies every field rule."""
    return {
        "title": "Valid Title",
        "body": "This is long enough.",
        "author": "Jane",
    }


@pytest.fixture
def test_settings():
    return Settings(storage_backend="memory", environment="test", api_prefix="/api")


@pytest.fixture
def test_app(test_settings, memory_gateway):
    """
    App instance whose routes all share `memory_gateway`.

    ASGITransport does not run the lifespan, so no store is created there;
    the dependency override supplies it instead.
    """
    app = create_app(test_settings)
    app.dependency_overrides[get_post_gateway] = lambda: memory_gateway
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/blogs")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
