"""Shared pytest fixtures for SandboxSeeder tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import get_settings
from app.main import create_app
from app.shared.gateway import InMemoryGateway


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Settings are re-read from the environment in every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def gateway():
    """In-memory document store standing in for the emulator."""
    return InMemoryGateway()


@pytest.fixture
async def client(gateway):
    """Create async HTTP client for testing FastAPI endpoints."""
    app = create_app()
    app.state.gateway = gateway
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
