"""Tests for application-level endpoints, middleware and error handlers."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from prometheus_client import REGISTRY

from hubintake.app.api.v1.dependencies import get_hub_registry
from hubintake.app.main import app
from hubintake.app.middleware.logging import _normalize_path


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_without_database(self, async_client: AsyncClient) -> None:
        """Engine is not initialized when the lifespan did not run."""
        response = await async_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["services"]["database"] == "not initialized"


class TestMetricsEndpoint:
    @pytest.mark.asyncio
    async def test_exposes_http_metrics(self, async_client: AsyncClient) -> None:
        await async_client.get("/api/v1/hubs")

        response = await async_client.get("/metrics")

        assert response.status_code == 200
        assert "hubintake_http_requests_total" in response.text


class TestRequestId:
    @pytest.mark.asyncio
    async def test_generated(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/hubs")

        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_propagated(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/api/v1/hubs", headers={"X-Request-ID": "req-123"}
        )

        assert response.headers["X-Request-ID"] == "req-123"


class TestUnexpectedError:
    @pytest_asyncio.fixture
    async def failing_client(self):
        """Client whose hub registry dependency blows up."""

        def broken_registry():
            raise RuntimeError("registry unavailable")

        app.dependency_overrides[get_hub_registry] = broken_registry
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
        app.dependency_overrides.clear()

    @staticmethod
    def _failed_count() -> float:
        return (
            REGISTRY.get_sample_value(
                "hubintake_http_requests_total",
                {"method": "GET", "endpoint": "/api/v1/hubs", "status": "500"},
            )
            or 0.0
        )

    @pytest.mark.asyncio
    async def test_internal_error_response(self, failing_client: AsyncClient) -> None:
        response = await failing_client.get(
            "/api/v1/hubs", headers={"X-Request-ID": "req-500"}
        )

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"
        assert response.headers["X-Request-ID"] == "req-500"

    @pytest.mark.asyncio
    async def test_failed_request_counted(self, failing_client: AsyncClient) -> None:
        before = self._failed_count()

        await failing_client.get("/api/v1/hubs")

        assert self._failed_count() == before + 1


class TestNormalizePath:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/api/v1/hubs", "/api/v1/hubs"),
            ("/api/v1/hubs/01HZX/sessions", "/api/v1/hubs/:id/sessions"),
            ("/api/v1/hubs/01HZX/sessions/close", "/api/v1/hubs/:id/sessions/close"),
            ("/api/v1/hubs/01HZX/items/last", "/api/v1/hubs/:id/items/last"),
            ("/api/v1/report", "/api/v1/report"),
            ("/unknown", "other"),
        ],
    )
    def test_normalize(self, path: str, expected: str) -> None:
        assert _normalize_path(path) == expected
