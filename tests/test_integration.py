"""End-to-end seeding through the HTTP API against an in-memory store."""

import pytest


@pytest.mark.asyncio
async def test_seeded_orders_are_relationally_consistent(client, gateway):
    response = await client.post(
        "/seeder/run", json={"options": {"count": 6, "seed": 21, "clear": True}}
    )
    assert response.status_code == 200

    users = {d.id: d.fields for d in await gateway.list_documents("users")}
    products = {d.id: d.fields for d in await gateway.list_documents("products")}
    orders = [d.fields for d in await gateway.list_documents("orders")]

    assert len(orders) == 6
    for order in orders:
        assert order["userId"] in users
        assert order["customer"]["email"] == users[order["userId"]]["email"]
        assert order["itemCount"] == sum(item["quantity"] for item in order["lineItems"])
        for item in order["lineItems"]:
            assert item["productId"] in products
            assert item["price"] == products[item["productId"]]["price"]
        pricing = order["pricing"]
        assert pricing["total"] == pytest.approx(
            pricing["subtotal"] + pricing["taxAmount"] + pricing["shippingCost"]
        )


@pytest.mark.asyncio
async def test_repeated_reset_keeps_requested_counts(client):
    for _ in range(2):
        response = await client.post("/seeder/reset", json={"count": 3})
        assert response.status_code == 200

    status = (await client.get("/seeder/status")).json()

    assert status["collections"] == {"users": 3, "products": 3, "orders": 3, "config": 3}
    assert status["total_documents"] == 12


@pytest.mark.asyncio
async def test_parallel_run_matches_sequential_totals(client, gateway):
    response = await client.post(
        "/seeder/run", json={"options": {"count": 4, "parallel": True}}
    )

    assert response.status_code == 200
    assert sorted(r["module"] for r in response.json()) == ["config", "orders", "products", "users"]
    assert await gateway.count_documents("orders") == 4
