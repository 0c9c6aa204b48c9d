"""
Blog API Backend - Middleware Tests
====================================

What we test:
    ✅ Every response carries X-Request-ID; a client-supplied id is echoed
    ✅ Error bodies carry the same request id
    ✅ Rate limiter answers 429 with Retry-After once the window is full
    ✅ /health is never rate limited
    ✅ Access log level follows the status class
"""

import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from uuid import uuid4

from blogapi.config import settings
from blogapi.middleware.logging import level_for_status
from blogapi.middleware.rate_limit import RateLimitMiddleware
from blogapi.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/api/users")

        assert len(response.headers[REQUEST_ID_HEADER]) == 8

    @pytest.mark.asyncio
    async def test_client_id_is_echoed(self, test_client):
        response = await test_client.get(f"/api/users/{uuid4()}", headers={REQUEST_ID_HEADER: "trace-123"})

        assert response.headers[REQUEST_ID_HEADER] == "trace-123"
        assert response.json()["request_id"] == "trace-123"


def make_limited_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_limit_exceeded(self, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 3)
        monkeypatch.setattr(settings, "rate_limit_window", 60)
        transport = ASGITransport(app=make_limited_app())

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [(await client.get("/ping")).status_code for _ in range(3)]
            rejected = await client.get("/ping", headers={REQUEST_ID_HEADER: "abc"})

        assert statuses == [200, 200, 200]
        assert rejected.status_code == 429
        assert 1 <= int(rejected.headers["Retry-After"]) <= 61
        body = rejected.json()
        assert body["error"] == "rate_limit_exceeded"
        assert body["request_id"] == "abc"

    @pytest.mark.asyncio
    async def test_health_is_excluded(self, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 1)
        transport = ASGITransport(app=make_limited_app())

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [(await client.get("/health")).status_code for _ in range(5)]

        assert statuses == [200] * 5


@pytest.mark.parametrize(
    "status, level",
    [(200, logging.INFO), (201, logging.INFO), (404, logging.WARNING), (429, logging.WARNING), (500, logging.ERROR)],
)
def test_level_for_status(status, level):
    assert level_for_status(status) == level
