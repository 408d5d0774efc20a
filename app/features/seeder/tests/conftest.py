"""Test fixtures for seeder feature tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import create_app
from app.shared.gateway import InMemoryGateway


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache between tests."""
    from app.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def gateway():
    """In-memory document store shared by the app and the test."""
    return InMemoryGateway()


@pytest.fixture
async def client(gateway):
    """Async HTTP client against an app backed by ``gateway``."""
    app = create_app()
    app.state.gateway = gateway
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
