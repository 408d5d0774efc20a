"""Fixtures for core tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import create_app
from app.shared.gateway import InMemoryGateway


@pytest.fixture
async def client():
    """Async HTTP client against an app backed by the in-memory gateway."""
    app = create_app()
    app.state.gateway = InMemoryGateway()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
