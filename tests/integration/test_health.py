"""Health endpoint tests."""

from httpx import AsyncClient


async def test_health_check(client: AsyncClient):
    """Health check reports the database probe."""
    response = await client.get("/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"] == "healthy"
    assert "version" in data
    assert "timestamp" in data


async def test_request_id_echoed(client: AsyncClient):
    response = await client.get("/v1/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
