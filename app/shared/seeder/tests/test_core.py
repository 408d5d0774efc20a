"""Tests for seed orchestration."""

import pytest

from app.core.logging import seed_run_id_ctx
from app.shared.seeder.config import SeedOptions
from app.shared.seeder.core import AggregateSummary, SeedOrchestrator
from app.shared.seeder.entity import SeedResult
from app.shared.seeder.errors import UnknownModule


async def fields_of(gateway, collection):
    return [d.fields for d in await gateway.list_documents(collection)]


class TestAggregateSummary:
    """Tests for AggregateSummary totals."""

    def test_totals(self):
        summary = AggregateSummary(
            results=[
                SeedResult.succeeded("users", created=5, deleted=2),
                SeedResult.failed("orders", "boom", created=1),
            ],
            total_duration_ms=30,
        )

        assert summary.total_created == 6
        assert summary.total_deleted == 2
        assert summary.success_count == 1
        assert summary.failure_count == 1
        assert summary.succeeded is False
        assert summary.to_dict()["results"][1]["error"] == "boom"

    def test_empty_summary_succeeds(self):
        assert AggregateSummary().succeeded


class TestSeedOrchestrator:
    """Tests for SeedOrchestrator.run and friends."""

    @pytest.mark.asyncio
    async def test_seed_all_in_dependency_order(self, gateway):
        orchestrator = SeedOrchestrator(gateway)

        summary = await orchestrator.run("all", SeedOptions(count=3, seed=1))

        assert [r.module for r in summary.results] == ["users", "products", "orders", "config"]
        assert summary.succeeded
        assert summary.total_created == 12
        assert await orchestrator.collection_counts() == {
            "users": 3,
            "products": 3,
            "orders": 3,
            "config": 3,
        }

    @pytest.mark.asyncio
    async def test_orders_reference_existing_parents(self, gateway):
        await SeedOrchestrator(gateway).run("all", SeedOptions(count=8, seed=3))

        user_ids = {d.id for d in await gateway.list_documents("users")}
        product_ids = {d.id for d in await gateway.list_documents("products")}
        for order in await fields_of(gateway, "orders"):
            assert order["userId"] in user_ids
            for item in order["lineItems"]:
                assert item["productId"] in product_ids

    @pytest.mark.asyncio
    async def test_default_counts(self, gateway):
        summary = await SeedOrchestrator(gateway).run("all", SeedOptions(seed=5))

        created = {r.module: r.created for r in summary.results}
        assert created == {"users": 10, "products": 10, "orders": 10, "config": 1}

    @pytest.mark.asyncio
    async def test_count_zero(self, gateway):
        summary = await SeedOrchestrator(gateway).run("all", SeedOptions(count=0))

        assert summary.succeeded
        assert summary.total_created == 0
        assert len(summary.results) == 4

    @pytest.mark.asyncio
    async def test_reset_is_idempotent(self, gateway):
        orchestrator = SeedOrchestrator(gateway)

        await orchestrator.reset(SeedOptions(count=4, seed=9))
        summary = await orchestrator.reset(SeedOptions(count=4, seed=9))

        assert summary.succeeded
        assert summary.total_deleted == 16
        assert set((await orchestrator.collection_counts()).values()) == {4}

    @pytest.mark.asyncio
    async def test_reset_ignores_skip_options(self, gateway):
        orchestrator = SeedOrchestrator(gateway)

        summary = await orchestrator.reset(
            SeedOptions(count=1, skip=True, skip_modules=frozenset({"users"}))
        )

        assert len(summary.results) == 4

    @pytest.mark.asyncio
    async def test_same_seed_same_content(self):
        from app.shared.gateway import InMemoryGateway

        first, second = InMemoryGateway(), InMemoryGateway()
        await SeedOrchestrator(first).run(["users", "products"], SeedOptions(count=5, seed=11))
        await SeedOrchestrator(second).run(["users", "products"], SeedOptions(count=5, seed=11))

        for collection, key in (("users", "email"), ("products", "sku")):
            a = sorted(f[key] for f in await fields_of(first, collection))
            b = sorted(f[key] for f in await fields_of(second, collection))
            assert a == b

    @pytest.mark.asyncio
    async def test_failure_is_isolated(self, flaky_gateway):
        flaky_gateway.fail_creates["users"] = 0

        summary = await SeedOrchestrator(flaky_gateway).run("all", SeedOptions(count=3, seed=2))

        results = {r.module: r for r in summary.results}
        assert results["users"].success is False
        assert results["users"].created == 0
        assert results["products"].success
        assert results["orders"].success
        assert results["config"].success
        assert summary.failure_count == 1
        # No users exist, so orders carry a null customer reference
        for order in await fields_of(flaky_gateway, "orders"):
            assert order["userId"] is None

    @pytest.mark.asyncio
    async def test_dependency_read_failure_only_fails_dependent(self, flaky_gateway):
        flaky_gateway.fail_lists.add("products")

        summary = await SeedOrchestrator(flaky_gateway).run("all", SeedOptions(count=2))

        failed = [r.module for r in summary.results if not r.success]
        assert failed == ["orders"]
        assert "products" in summary.result_for("orders").error

    @pytest.mark.asyncio
    async def test_crashing_seeder_is_recorded(self, gateway, monkeypatch):
        orchestrator = SeedOrchestrator(gateway)

        async def explode(*args, **kwargs):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(orchestrator.registry.get("products"), "run", explode)
        summary = await orchestrator.run("all", SeedOptions(count=1))

        assert summary.result_for("products").error == "kaboom"
        assert summary.success_count == 3

    @pytest.mark.asyncio
    async def test_skip_returns_empty_summary(self, gateway):
        summary = await SeedOrchestrator(gateway).run("all", SeedOptions(skip=True))

        assert summary.results == []
        assert await gateway.count_documents("users") == 0

    @pytest.mark.asyncio
    async def test_skip_modules(self, gateway):
        summary = await SeedOrchestrator(gateway).run(
            "all", SeedOptions(count=1, skip_modules=frozenset({"orders", "config"}))
        )

        assert [r.module for r in summary.results] == ["users", "products"]

    @pytest.mark.asyncio
    async def test_parallel_run(self, gateway):
        summary = await SeedOrchestrator(gateway).run(
            "all", SeedOptions(count=4, seed=8, parallel=True)
        )

        assert summary.succeeded
        assert {r.module for r in summary.results} == {"users", "products", "orders", "config"}
        assert summary.results[-1].module == "orders"
        user_ids = {d.id for d in await gateway.list_documents("users")}
        for order in await fields_of(gateway, "orders"):
            assert order["userId"] in user_ids

    @pytest.mark.asyncio
    async def test_run_module(self, gateway):
        result = await SeedOrchestrator(gateway).run_module("products", SeedOptions(count=2))

        assert result.module == "products"
        assert result.created == 2
        assert await gateway.count_documents("users") == 0

    @pytest.mark.asyncio
    async def test_orders_sample_parents_seeded_earlier(self, gateway):
        user_ids = {
            await gateway.create_document(
                "users", {"displayName": f"User {i}", "email": f"u{i}@x.io"}
            )
            for i in range(3)
        }
        product_ids = {
            await gateway.create_document("products", {"name": f"Item {i}", "price": 5.0 + i})
            for i in range(10)
        }
        await gateway.create_document("orders", {"orderNumber": "ORD-OLD"})

        result = await SeedOrchestrator(gateway).run_module(
            "orders", SeedOptions(count=5, clear=True, seed=13)
        )

        assert result.success
        assert result.created == 5
        assert result.deleted == 1
        orders = await fields_of(gateway, "orders")
        assert len(orders) == 5
        for order in orders:
            assert order["userId"] in user_ids
            assert {item["productId"] for item in order["lineItems"]} <= product_ids
        assert await gateway.count_documents("users") == 3
        assert await gateway.count_documents("products") == 10

    @pytest.mark.asyncio
    async def test_run_module_skipped(self, gateway):
        result = await SeedOrchestrator(gateway).run_module("products", SeedOptions(skip=True))

        assert result.success
        assert result.created == 0

    @pytest.mark.asyncio
    async def test_unknown_module(self, gateway):
        with pytest.raises(UnknownModule):
            await SeedOrchestrator(gateway).run("invoices")

    @pytest.mark.asyncio
    async def test_run_id_scoped_to_run(self, gateway):
        summary = await SeedOrchestrator(gateway).run("config")

        assert summary.run_id
        assert seed_run_id_ctx.get() is None
