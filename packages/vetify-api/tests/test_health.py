"""Tests for the health check endpoint."""

import pytest
from httpx import AsyncClient

from vetify import __version__


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Health endpoint returns ok status, version and limiter state."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "version": __version__,
        "rateLimiting": "enabled",
    }


@pytest.mark.asyncio
async def test_health_reports_disabled_rate_limiting(client: AsyncClient, settings):
    settings.rate_limit_enabled = False
    response = await client.get("/health")
    assert response.json()["rateLimiting"] == "disabled"


@pytest.mark.asyncio
async def test_health_needs_no_api_key(client: AsyncClient):
    response = await client.get("/health", headers={"Authorization": "Token abc"})
    assert response.status_code == 200
