# =============================================================================
# QUOTE API - HEALTH TESTS
# =============================================================================
# File: tests/test_health.py
# Description: Health endpoints, startup failure and request middleware
# =============================================================================

import pytest
from httpx import AsyncClient

from quote_api.core.exceptions import StorageIOError
from quote_api.main import create_application

from conftest import make_settings


class TestHealthEndpoints:
    """Test suite for health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "OK",
            "database": "sqlite",
            "environment": "development",
        }

    @pytest.mark.asyncio
    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/api/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["connected"] is True
        assert data["status"] == "OK"

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "running"
        assert data["database"] == "sqlite"


class TestRequestMiddleware:
    """Request ID propagation."""

    @pytest.mark.asyncio
    async def test_request_id_generated(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_envelope(self, client: AsyncClient):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json()["error"] is True


class TestStartup:
    """Startup fails fatally when the database cannot be opened."""

    @pytest.mark.asyncio
    async def test_unopenable_sqlite_path_aborts_startup(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied")
        app = create_application(make_settings(sqlite_db=str(blocker / "db.sqlite")))

        with pytest.raises(StorageIOError):
            async with app.router.lifespan_context(app):
                pass
