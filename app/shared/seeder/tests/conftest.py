"""Pytest fixtures for seeder tests."""

import asyncio
from datetime import UTC, datetime
from typing import Any

import pytest

from app.shared.gateway import GatewayRequestError, InMemoryGateway
from app.shared.seeder.config import SeedOptions
from app.shared.seeder.templates import TemplateStore
from app.shared.seeder.values import ValueGenerator

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


class FlakyGateway(InMemoryGateway):
    """In-memory gateway with injectable failures and delays.

    Attributes:
        fail_creates: Collection -> number of successful creates before every
            further create fails.
        fail_deletes: Collections whose deletes always fail.
        fail_lists: Collections whose listing always fails.
        delay: Seconds every call sleeps before doing its work.
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_creates: dict[str, int] = {}
        self.fail_deletes: set[str] = set()
        self.fail_lists: set[str] = set()
        self.delay = 0.0
        self._creates: dict[str, int] = {}

    async def _pause(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)

    async def create_document(self, collection: str, fields: dict[str, Any]) -> str:
        await self._pause()
        done = self._creates.get(collection, 0)
        if collection in self.fail_creates and done >= self.fail_creates[collection]:
            raise GatewayRequestError(f"write to {collection} rejected", status=500)
        self._creates[collection] = done + 1
        return await super().create_document(collection, fields)

    async def list_documents(self, collection: str, limit: int | None = None):
        await self._pause()
        if collection in self.fail_lists:
            raise GatewayRequestError(f"list of {collection} rejected", status=503)
        return await super().list_documents(collection, limit)

    async def delete_document(self, collection: str, document_id: str) -> None:
        await self._pause()
        if collection in self.fail_deletes:
            raise GatewayRequestError(f"delete in {collection} rejected", status=500)
        await super().delete_document(collection, document_id)


@pytest.fixture
def gateway():
    """Empty in-memory document store."""
    return InMemoryGateway()


@pytest.fixture
def flaky_gateway():
    """In-memory document store with failure injection."""
    return FlakyGateway()


@pytest.fixture
def values():
    """Seeded value generator with a fixed reference time."""
    return ValueGenerator(seed=42, now=FIXED_NOW)


@pytest.fixture
def templates():
    """Store over the packaged templates."""
    return TemplateStore()


@pytest.fixture
def options():
    """Deterministic options with small counts."""
    return SeedOptions(count=5, seed=42)
