"""Unit tests for seeder routes."""

from unittest.mock import patch

import pytest
from fastapi import status

from app.shared.seeder import SeedResult


@pytest.fixture
def production_settings():
    """Settings that put the routes behind the production guard."""
    with patch("app.features.seeder.routes.get_settings") as mock:
        mock.return_value.seeder_allow_production = False
        mock.return_value.app_env = "production"
        yield mock


class TestRunSeed:
    """Tests for POST /seeder/run endpoint."""

    @pytest.mark.asyncio
    async def test_seed_all(self, client, gateway):
        response = await client.post(
            "/seeder/run", json={"module": "all", "options": {"count": 2, "seed": 5}}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [r["module"] for r in data] == ["users", "products", "orders", "config"]
        assert all(r["success"] for r in data)
        assert "durationMs" in data[0]
        assert await gateway.count_documents("orders") == 2

    @pytest.mark.asyncio
    async def test_empty_body_seeds_all_with_defaults(self, client, gateway):
        response = await client.post("/seeder/run", json={})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()) == 4
        assert await gateway.count_documents("config") == 1

    @pytest.mark.asyncio
    async def test_seed_single_module(self, client, gateway):
        response = await client.post(
            "/seeder/run", json={"module": "products", "options": {"count": 3}}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["module"] == "products"
        assert data["created"] == 3
        assert "error" not in data
        assert await gateway.count_documents("users") == 0

    @pytest.mark.asyncio
    async def test_clear_replaces_documents(self, client, gateway):
        body = {"module": "users", "options": {"count": 2, "clear": True}}
        await client.post("/seeder/run", json=body)

        response = await client.post("/seeder/run", json=body)

        assert response.json()["deleted"] == 2
        assert await gateway.count_documents("users") == 2

    @pytest.mark.asyncio
    async def test_unknown_module_is_problem(self, client):
        response = await client.post("/seeder/run", json={"module": "invoices"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["code"] == "UNKNOWN_MODULE"

    @pytest.mark.asyncio
    async def test_invalid_count(self, client):
        response = await client.post("/seeder/run", json={"options": {"count": -1}})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_failed_module_returns_500_with_results(self, client):
        results = [
            SeedResult.succeeded("users", created=2),
            SeedResult.failed("products", "write to products rejected"),
        ]

        with patch("app.features.seeder.routes.service.run_seed", return_value=results):
            response = await client.post("/seeder/run", json={})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert data[0]["success"] is True
        assert data[1]["error"] == "write to products rejected"

    @pytest.mark.asyncio
    async def test_blocked_in_production(self, client, gateway, production_settings):
        response = await client.post("/seeder/run", json={})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["code"] == "FORBIDDEN"
        assert await gateway.count_documents("users") == 0


class TestReset:
    """Tests for POST /seeder/reset endpoint."""

    @pytest.mark.asyncio
    async def test_reset(self, client, gateway):
        await client.post("/seeder/run", json={"options": {"count": 3}})

        response = await client.post("/seeder/reset", json={"count": 1, "seed": 2})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["total_deleted"] == 12
        assert data["total_created"] == 4
        assert data["seed"] == 2
        assert all("error" not in r for r in data["results"])
        assert await gateway.count_documents("products") == 1

    @pytest.mark.asyncio
    async def test_reset_without_body(self, client, gateway):
        response = await client.post("/seeder/reset")

        assert response.status_code == status.HTTP_200_OK
        assert await gateway.count_documents("users") == 10

    @pytest.mark.asyncio
    async def test_reset_blocked_in_production(self, client, production_settings):
        response = await client.post("/seeder/reset")

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestListModules:
    """Tests for GET /seeder/modules endpoint."""

    @pytest.mark.asyncio
    async def test_returns_modules(self, client):
        response = await client.get("/seeder/modules")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [m["name"] for m in data] == ["users", "products", "orders", "config"]
        assert data[2]["dependencies"] == ["users", "products"]


class TestGetStatus:
    """Tests for GET /seeder/status endpoint."""

    @pytest.mark.asyncio
    async def test_returns_counts(self, client):
        await client.post("/seeder/run", json={"module": "users", "options": {"count": 4}})

        response = await client.get("/seeder/status")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["collections"]["users"] == 4
        assert data["total_documents"] == 4

    @pytest.mark.asyncio
    async def test_allowed_in_production(self, client, production_settings):
        response = await client.get("/seeder/status")

        assert response.status_code == status.HTTP_200_OK
