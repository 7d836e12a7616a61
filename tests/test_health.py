"""
Health and root endpoint tests.
"""

from httpx import AsyncClient

from portfolio_api.core.config import settings


async def test_health_check(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == settings.APP_VERSION


async def test_root(client: AsyncClient):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["api"] == "/api"


async def test_unknown_route(client: AsyncClient):
    response = await client.get("/api/nothing-here")
    assert response.status_code == 404
