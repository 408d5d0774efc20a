"""Tests for the relationship resolver."""

import pytest

from app.shared.seeder.errors import DependencyUnavailable, InvalidConstraint
from app.shared.seeder.resolver import DependencyPool, PoolRecord, resolve_pool


@pytest.mark.asyncio
async def test_pool_captures_requested_fields_only(gateway):
    await gateway.create_document("users", {"displayName": "Ada", "email": "a@x.io", "age": 36})

    pool = await resolve_pool(gateway, "users", limit=50, fields=("displayName", "email"))

    assert len(pool) == 1
    assert pool.records[0].fields == {"displayName": "Ada", "email": "a@x.io"}


@pytest.mark.asyncio
async def test_pool_bounded_by_limit(gateway):
    for i in range(10):
        await gateway.create_document("products", {"name": f"p{i}"})

    pool = await resolve_pool(gateway, "products", limit=3)

    assert len(pool) == 3


@pytest.mark.asyncio
async def test_empty_collection_gives_empty_pool(gateway):
    pool = await resolve_pool(gateway, "users", limit=50)

    assert pool.is_empty
    assert pool.ids == frozenset()


@pytest.mark.asyncio
async def test_zero_limit_skips_the_store(flaky_gateway):
    flaky_gateway.fail_lists.add("users")

    pool = await resolve_pool(flaky_gateway, "users", limit=0)

    assert pool.is_empty


@pytest.mark.asyncio
async def test_negative_limit_rejected(gateway):
    with pytest.raises(InvalidConstraint):
        await resolve_pool(gateway, "users", limit=-1)


@pytest.mark.asyncio
async def test_gateway_failure_becomes_dependency_unavailable(flaky_gateway):
    flaky_gateway.fail_lists.add("users")

    with pytest.raises(DependencyUnavailable) as exc_info:
        await resolve_pool(flaky_gateway, "users", limit=10)

    assert exc_info.value.collection == "users"


class TestDependencyPool:
    """Tests for pool sampling."""

    @pytest.fixture
    def pool(self):
        return DependencyPool(
            "products",
            tuple(PoolRecord(f"p{i}", {"price": float(i)}) for i in range(4)),
        )

    def test_pick_one_from_pool(self, pool, values):
        for _ in range(20):
            assert pool.pick_one(values).id in pool.ids

    def test_pick_from_empty_pool(self, values):
        empty = DependencyPool("products")

        assert empty.pick_one(values) is None
        assert empty.pick_many(values, 3) == []

    def test_pick_many_draws_with_replacement(self, pool, values):
        picked = pool.pick_many(values, 10)

        assert len(picked) == 10
        assert {r.id for r in picked} <= pool.ids

    def test_pick_many_from_single_parent(self, values):
        single = DependencyPool("products", (PoolRecord("only"),))

        assert [r.id for r in single.pick_many(values, 3)] == ["only", "only", "only"]

    def test_record_get(self, pool):
        assert pool.records[2].get("price") == 2.0
        assert pool.records[2].get("name", "n/a") == "n/a"
