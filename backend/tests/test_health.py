"""
Blog API Backend - Health Endpoint Tests
=========================================
"""

import pytest
from unittest.mock import AsyncMock

from blogapi import __version__
from blogapi.database import get_db_session


@pytest.mark.asyncio
async def test_health_connected(test_client):
    response = await test_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["version"] == __version__
    assert body["uptime_seconds"] >= 0


@pytest.mark.asyncio
async def test_health_disconnected(test_client):
    from blogapi.main import app

    broken = AsyncMock()
    broken.execute = AsyncMock(side_effect=OSError("connection refused"))

    async def broken_session():
        yield broken

    app.dependency_overrides[get_db_session] = broken_session

    response = await test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "unhealthy"
    assert response.json()["database"] == "disconnected"
