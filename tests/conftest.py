"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Set APP_ENV to testing before any app imports to disable rate limiting
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./movieclub-test.db")
os.environ.setdefault("TMDB_API_KEY", "test-tmdb-key")
# Cheap hashing keeps registration-heavy tests fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")
os.environ.pop("REDIS_URL", None)

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator, Generator

import pytest
from fakeredis import aioredis as fakeredis_aio
from redis.asyncio import Redis

from src.movieclub.core import rate_limit
from src.movieclub.core import redis as redis_core
from src.movieclub.core.config import get_settings

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()

# --- Rate Limit Fixtures ---


@pytest.fixture
def reset_rate_limit_buckets() -> Generator[None]:
    """Reset rate limit in-memory state around a test."""
    rate_limit.reset_rate_limit_state()
    yield
    rate_limit.reset_rate_limit_state()


# --- Redis Test Fixtures (shared) ---


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """In-memory Redis that behaves like a real server."""
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def mock_redis(fake_redis: Redis, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Redis]:
    """Patches get_redis() to return the fakeredis client.

    Patches every module that imported get_redis so the fake is used everywhere.
    """
    redis_core.reset_redis_state()

    async def _get_fake_redis() -> Redis:
        return fake_redis

    monkeypatch.setattr("src.movieclub.core.redis.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.movieclub.core.cache.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.movieclub.core.health.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.movieclub.core.rate_limit.get_redis", _get_fake_redis)
    yield fake_redis
    redis_core.reset_redis_state()


@pytest.fixture
async def mock_redis_unavailable(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[None]:
    """Patches get_redis() to return None (Redis unavailable)."""
    redis_core.reset_redis_state()

    async def _get_none() -> None:
        return None

    monkeypatch.setattr("src.movieclub.core.redis.get_redis", _get_none)
    monkeypatch.setattr("src.movieclub.core.cache.get_redis", _get_none)
    monkeypatch.setattr("src.movieclub.core.health.get_redis", _get_none)
    monkeypatch.setattr("src.movieclub.core.rate_limit.get_redis", _get_none)
    yield
    redis_core.reset_redis_state()
