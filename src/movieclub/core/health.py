"""Health check and metrics endpoints."""

import secrets
import time
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator

from src.movieclub.core.config import get_settings
from src.movieclub.core.db import Database
from src.movieclub.core.logging import get_logger
from src.movieclub.core.movie_metadata import MovieMetadataClient
from src.movieclub.core.redis import get_redis
from src.movieclub.core.shutdown import request_tracker

logger = get_logger(__name__)

HEALTH_CACHE_TTL = 10  # seconds


async def _database_status(database: Database) -> str:
    try:
        await database.ping()
    except Exception as e:
        logger.warning("Health check: database unreachable", error=str(e))
        return f"unhealthy: {e!s}"
    return "healthy"


async def _redis_status() -> str:
    redis = await get_redis()
    if redis is None:
        return "not_configured"
    try:
        await redis.ping()  # type: ignore[misc]
    except Exception as e:
        logger.warning("Health check: redis unreachable", error=str(e))
        return f"unhealthy: {e!s}"
    return "healthy"


class HealthChecker:
    """Probes dependencies and memoizes the report for HEALTH_CACHE_TTL seconds."""

    def __init__(self, ttl: float = HEALTH_CACHE_TTL):
        self.ttl = ttl
        self._report: dict[str, Any] | None = None
        self._checked_at: float = 0

    def reset(self) -> None:
        self._report = None
        self._checked_at = 0

    async def report(
        self, database: Database, movie_client: MovieMetadataClient | None
    ) -> dict[str, Any]:
        now = time.time()
        age = now - self._checked_at
        if self._report is not None and age < self.ttl:
            return {**self._report, "cached": True, "cache_age_seconds": round(age, 1)}

        database_status = await _database_status(database)
        redis_status = await _redis_status()

        # Redis is optional; its failure only degrades
        if database_status != "healthy":
            overall = "unhealthy"
        elif redis_status.startswith("unhealthy"):
            overall = "degraded"
        else:
            overall = "healthy"

        self._report = {
            "status": overall,
            "database": database_status,
            "redis": redis_status,
            "movie_metadata": (
                "configured"
                if movie_client is not None and movie_client.is_configured
                else "not_configured"
            ),
            "cached": False,
            "timestamp": now,
        }
        self._checked_at = now
        return self._report


health_checker = HealthChecker()


def reset_health_cache() -> None:
    """Forget the memoized report (for testing)."""
    health_checker.reset()


def setup_health_endpoint(app: FastAPI) -> None:
    @app.get("/health", tags=["health"])
    async def health(request: Request) -> JSONResponse:
        """Dependency health. 200 when healthy, 503 when degraded, unhealthy or draining."""
        if request_tracker.is_shutting_down:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "status": "draining",
                    "in_flight_requests": request_tracker.in_flight_count,
                    "message": "Server is shutting down",
                },
            )

        report = await health_checker.report(
            request.app.state.database, request.app.state.movie_client
        )
        status_code = (
            status.HTTP_200_OK
            if report["status"] == "healthy"
            else status.HTTP_503_SERVICE_UNAVAILABLE
        )
        return JSONResponse(status_code=status_code, content=report)


def setup_metrics(app: FastAPI) -> None:
    """Expose Prometheus metrics at /metrics, behind X-Metrics-Key when METRICS_API_KEY is set."""
    expected_key = get_settings().metrics_api_key
    instrumentator = Instrumentator(excluded_handlers=["/health", "/metrics"]).instrument(app)

    if not expected_key:
        instrumentator.expose(app, endpoint="/metrics", tags=["health"])
        return

    metrics_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def verify_metrics_key(provided: str | None = Depends(metrics_key_header)) -> None:
        if provided is None or not secrets.compare_digest(provided, expected_key):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(
        app, endpoint="/metrics", tags=["health"], dependencies=[Depends(verify_metrics_key)]
    )
