"""Tests for hub API.

Tests cover:
- POST /api/v1/hubs - Register hub
- GET /api/v1/hubs - List hubs
"""

import pytest
from httpx import AsyncClient


class TestCreateHub:
    """Tests for POST /api/v1/hubs."""

    @pytest.mark.asyncio
    async def test_create_hub(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/api/v1/hubs", json={"location": "Moscow"})

        assert response.status_code == 201
        data = response.json()
        assert data["location"] == "Moscow"
        assert data["id"]
        assert "registered_at" in data

    @pytest.mark.asyncio
    async def test_unknown_location(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/api/v1/hubs", json={"location": "Atlantis"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    @pytest.mark.asyncio
    async def test_missing_location(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/api/v1/hubs", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    @pytest.mark.asyncio
    async def test_configured_locations(
        self, async_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HUBINTAKE_INTAKE__LOCATIONS", '["Atlantis"]')

        response = await async_client.post("/api/v1/hubs", json={"location": "Atlantis"})

        assert response.status_code == 201


class TestListHubs:
    """Tests for GET /api/v1/hubs."""

    @pytest.mark.asyncio
    async def test_list_empty(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/hubs")

        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}

    @pytest.mark.asyncio
    async def test_list_in_registration_order(self, async_client: AsyncClient) -> None:
        ids = []
        for location in ("Moscow", "Kazan", "Saint Petersburg"):
            response = await async_client.post("/api/v1/hubs", json={"location": location})
            ids.append(response.json()["id"])

        response = await async_client.get("/api/v1/hubs")

        data = response.json()
        assert data["total"] == 3
        assert [hub["id"] for hub in data["items"]] == ids
