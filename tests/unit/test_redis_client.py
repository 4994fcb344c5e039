"""Tests for the optional Redis client."""

from collections.abc import Generator
from unittest.mock import AsyncMock, patch

import pytest

from src.movieclub.core import redis as redis_module
from src.movieclub.core.config import get_settings
from src.movieclub.core.redis import close_redis, get_redis, reset_redis_state

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clean_state() -> Generator[None]:
    reset_redis_state()
    yield
    reset_redis_state()
    get_settings.cache_clear()


async def test_not_configured_returns_none() -> None:
    assert await get_redis() is None
    assert redis_module._connection_attempted is True


async def test_failed_attempt_not_retried(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_URL", "redis://redis.invalid:6379/0")
    get_settings.cache_clear()

    with patch(
        "src.movieclub.core.redis.Redis.ping", AsyncMock(side_effect=ConnectionError("refused"))
    ) as ping:
        assert await get_redis() is None
        assert await get_redis() is None

    assert ping.await_count == 1
    assert redis_module._redis is None
    assert redis_module._pool is None


async def test_connects_and_reuses_client(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
    get_settings.cache_clear()

    with patch("src.movieclub.core.redis.Redis.ping", AsyncMock(return_value=True)) as ping:
        first = await get_redis()
        second = await get_redis()

    assert first is not None
    assert first is second
    assert ping.await_count == 1
    await close_redis()


async def test_close_allows_a_fresh_attempt() -> None:
    await get_redis()
    assert redis_module._connection_attempted is True

    await close_redis()

    assert redis_module._connection_attempted is False
    assert redis_module._redis is None
