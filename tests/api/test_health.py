"""Tests for health endpoints"""
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from unittest.mock import AsyncMock, patch

from app.api import health
from tests.conftest import FakeTransport


class DownTransport(FakeTransport):
    name = "down"

    async def is_healthy(self) -> bool:
        return False


def build_app(transport=None, uses_database=False):
    app = FastAPI()
    app.state.service_name = "health-test"
    app.state.uses_database = uses_database
    if transport is not None:
        app.state.event_transport = transport
    app.include_router(health.router, prefix="/api")
    return app


async def get(app, path):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.get(path)


class TestHealthEndpoints:
    """Test liveness and readiness probes"""

    async def test_liveness(self):
        response = await get(build_app(), "/api/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    async def test_ready_when_dependencies_healthy(self):
        with patch("app.api.health.ping_database", AsyncMock(return_value=True)):
            response = await get(build_app(FakeTransport(), uses_database=True), "/api/health/ready")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "ready"
        assert {c["name"] for c in body["checks"]} == {"database", "fake_transport"}

    async def test_not_ready_when_transport_down(self):
        response = await get(build_app(DownTransport()), "/api/health/ready")

        body = response.json()
        assert response.status_code == 503
        assert body["status"] == "not ready"
        assert body["errors"] == ["down_transport: down transport is not reachable"]

    async def test_not_ready_when_database_unreachable(self):
        with patch("app.api.health.ping_database", AsyncMock(side_effect=OSError("refused"))):
            response = await get(build_app(uses_database=True), "/api/health/ready")

        assert response.status_code == 503
        assert response.json()["checks"][0]["error"] == "refused"
