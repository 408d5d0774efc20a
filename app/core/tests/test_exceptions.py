"""Tests for problem details error handling."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from app.core.exceptions import ForbiddenError, SandboxError, register_exception_handlers
from app.core.middleware import RequestIdMiddleware
from app.shared.seeder.errors import TemplateNotFound, UnknownModule


class Payload(BaseModel):
    count: int


@pytest.fixture
async def error_client():
    """Client for a small app whose routes raise known errors."""
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)

    @app.get("/missing")
    async def missing():
        raise TemplateNotFound("widgets", details={"templates_dir": "/tmp"})

    @app.get("/forbidden")
    async def forbidden():
        raise ForbiddenError()

    @app.get("/unknown-module")
    async def unknown_module():
        raise UnknownModule("widgets", ["users", "orders"])

    @app.post("/validate")
    async def validate(payload: Payload):
        return payload

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac


def test_sandbox_error_title_from_code():
    """Title should be derived from the machine-readable code."""
    error = SandboxError("x", code="PERSISTENCE_FAILURE", status_code=502)
    assert error.title == "Persistence Failure"
    assert error.details == {}


@pytest.mark.asyncio
async def test_template_not_found_rendered_as_problem(error_client):
    response = await error_client.get("/missing", headers={"X-Request-ID": "req-42"})

    assert response.status_code == 404
    assert response.headers["content-type"] == "application/problem+json"
    body = response.json()
    assert body["code"] == "TEMPLATE_NOT_FOUND"
    assert body["detail"] == "No fixture template registered for entity type 'widgets'"
    assert body["details"] == {"entity_type": "widgets", "templates_dir": "/tmp"}
    assert body["request_id"] == "req-42"


@pytest.mark.asyncio
async def test_forbidden_status(error_client):
    response = await error_client.get("/forbidden")

    assert response.status_code == 403
    assert response.json()["type"] == "/errors/forbidden"


@pytest.mark.asyncio
async def test_seeder_error_uses_seeder_type(error_client):
    response = await error_client.get("/unknown-module")

    assert response.status_code == 404
    body = response.json()
    assert body["type"] == "/errors/seeder/unknown-module"
    assert body["details"]["available"] == ["users", "orders"]


@pytest.mark.asyncio
async def test_validation_errors_listed(error_client):
    response = await error_client.post("/validate", json={"count": "many"})

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["errors"][0]["field"] == "count"


@pytest.mark.asyncio
async def test_unhandled_error_hides_internals(error_client):
    response = await error_client.get("/boom")

    assert response.status_code == 500
    assert "secret internals" not in response.text
    assert response.json()["code"] == "INTERNAL_ERROR"
