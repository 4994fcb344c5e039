"""Tests for health checks, metrics and request ids on responses."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from redis.asyncio import Redis

from src.movieclub.core.db import Database
from src.movieclub.core.movie_metadata import MovieMetadataClient
from src.movieclub.core.shutdown import request_tracker
from src.movieclub.main import create_app

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


class MockTime:
    def __init__(self) -> None:
        self.current_time = 0.0

    def __call__(self) -> float:
        return self.current_time


class TestHealth:
    async def test_reports_dependencies(self, client: AsyncClient, mock_redis: Redis) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["redis"] == "healthy"
        assert data["movie_metadata"] == "configured"
        assert data["cached"] is False
        assert isinstance(data["timestamp"], int | float)

    async def test_redis_is_optional(self, client: AsyncClient, mock_redis_unavailable) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["redis"] == "not_configured"

    async def test_redis_failure_degrades(self, client: AsyncClient, mock_redis: Redis) -> None:
        with patch.object(mock_redis, "ping", AsyncMock(side_effect=ConnectionError("down"))):
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"

    async def test_database_failure_is_unhealthy(
        self, client: AsyncClient, database: Database, mock_redis_unavailable
    ) -> None:
        with patch.object(database, "ping", AsyncMock(side_effect=OSError("db gone"))):
            response = await client.get("/health")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["database"].startswith("unhealthy")

    async def test_results_cached_until_ttl(
        self, client: AsyncClient, database: Database, mock_redis_unavailable
    ) -> None:
        mock_time = MockTime()
        ping = AsyncMock()

        with (
            patch("src.movieclub.core.health.time.time", mock_time),
            patch.object(database, "ping", ping),
        ):
            first = (await client.get("/health")).json()
            mock_time.current_time = 1.0
            second = (await client.get("/health")).json()
            mock_time.current_time = 15.0
            third = (await client.get("/health")).json()

        assert first["cached"] is False
        assert second["cached"] is True
        assert second["cache_age_seconds"] == 1.0
        assert third["cached"] is False
        assert ping.await_count == 2

    async def test_draining_returns_503(self, client: AsyncClient) -> None:
        await request_tracker.start_shutdown()

        response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "draining"


class TestMetrics:
    async def test_metrics_exposed(self, client: AsyncClient) -> None:
        await client.get("/api/v1/ratings/latest")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]


class TestRequestId:
    async def test_response_carries_request_id_header(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/ratings/latest")

        assert response.headers.get("X-Request-ID")

    async def test_incoming_request_id_is_echoed(self, client: AsyncClient) -> None:
        request_id = "0f8fad5b-d9cb-469f-a165-70867728950e"

        response = await client.get("/api/v1/nonexistent", headers={"X-Request-ID": request_id})

        assert response.headers["X-Request-ID"] == request_id
        assert response.json()["request_id"] == request_id

    async def test_error_bodies_include_request_id(self, client: AsyncClient) -> None:
        not_found = await client.get("/api/v1/nonexistent")
        invalid = await client.get("/api/v1/ratings/latest?limit=0")
        unauthorized = await client.get("/api/v1/auth/me")

        for response in (not_found, invalid, unauthorized):
            data = response.json()
            assert data["request_id"]
            assert data["request_id"] == response.headers["X-Request-ID"]
        assert not_found.json()["request_id"] != invalid.json()["request_id"]

    async def test_unhandled_error_is_500_with_request_id(
        self, database: Database, movie_client: MovieMetadataClient
    ) -> None:
        app = create_app(database=database, movie_client=movie_client)

        async def explode() -> None:
            raise RuntimeError("kaboom")

        app.add_api_route("/boom", explode)

        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as client:
            response = await client.get("/boom")

        assert response.status_code == 500
        data = response.json()
        assert data["detail"] == "Internal server error"
        assert "request_id" in data


class TestSecurityHeaders:
    async def test_baseline_headers(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/ratings/latest")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Content-Security-Policy" in response.headers

    async def test_auth_responses_not_cached(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/login", json={"email": "nobody@example.com", "password": "whatever"}
        )

        assert "no-store" in response.headers["Cache-Control"]
        assert response.headers["Pragma"] == "no-cache"
