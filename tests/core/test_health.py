import pytest
from httpx import AsyncClient


class TestHealth:
    @pytest.mark.asyncio
    async def test_root_reports_version(self, test_client: AsyncClient):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    @pytest.mark.asyncio
    async def test_health_is_degraded_without_redis(self, test_client: AsyncClient):
        response = await test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["database"] == "healthy"
        assert data["redis"] == "unknown"
        assert data["status"] == "degraded"
