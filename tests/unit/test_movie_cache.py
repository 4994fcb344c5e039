"""Tests for the TMDB payload cache and the caching movie service."""

from typing import Any
from unittest.mock import AsyncMock

import pytest
from redis.asyncio import Redis

from src.movieclub.core.cache import (
    get_cached_json,
    movie_details_key,
    movie_search_key,
    set_cached_json,
)
from src.movieclub.services.movie_service import MovieService, empty_search_result

pytestmark = pytest.mark.unit


class FakeMovieClient:
    """Records upstream calls instead of talking to TMDB."""

    language = "fr-FR"

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    async def get_movie(self, movie_id: int) -> dict[str, Any]:
        self.calls.append(("movie", movie_id))
        return {"id": movie_id, "title": "Heat"}

    async def search_movies(self, query: str, page: int = 1) -> dict[str, Any]:
        self.calls.append(("search", (query, page)))
        return {"page": page, "results": [{"title": query}], "total_pages": 1, "total_results": 1}


class TestCacheKeys:
    def test_details_key_includes_language(self):
        assert movie_details_key(550, "fr-FR") == "tmdb:movie:fr-FR:550"
        assert movie_details_key(550, "en-US") != movie_details_key(550, "fr-FR")

    def test_search_key_normalizes_query(self):
        assert movie_search_key("  The  Matrix ", 1, "fr-FR") == movie_search_key(
            "the matrix", 1, "fr-FR"
        )

    def test_search_key_varies_by_page(self):
        assert movie_search_key("heat", 1, "fr-FR") != movie_search_key("heat", 2, "fr-FR")


class TestCachedJson:
    async def test_roundtrip_with_ttl(self, mock_redis: Redis):
        assert await set_cached_json("tmdb:movie:fr-FR:1", {"id": 1}, 60) is True

        assert await get_cached_json("tmdb:movie:fr-FR:1") == {"id": 1}
        assert 0 < await mock_redis.ttl("tmdb:movie:fr-FR:1") <= 60

    async def test_miss_returns_none(self, mock_redis: Redis):
        assert await get_cached_json("tmdb:movie:fr-FR:missing") is None

    async def test_unreadable_entry_is_a_miss(self, mock_redis: Redis):
        await mock_redis.set("tmdb:movie:fr-FR:2", "{not json")

        assert await get_cached_json("tmdb:movie:fr-FR:2") is None

    async def test_redis_unavailable(self, mock_redis_unavailable):
        assert await set_cached_json("key", {"a": 1}, 60) is False
        assert await get_cached_json("key") is None

    async def test_redis_errors_are_swallowed(self, monkeypatch: pytest.MonkeyPatch):
        broken = AsyncMock()
        broken.get.side_effect = ConnectionError("boom")
        broken.setex.side_effect = ConnectionError("boom")
        monkeypatch.setattr("src.movieclub.core.cache.get_redis", AsyncMock(return_value=broken))

        assert await get_cached_json("key") is None
        assert await set_cached_json("key", {"a": 1}, 60) is False


class TestMovieService:
    async def test_details_served_from_cache_second_time(self, mock_redis: Redis):
        client = FakeMovieClient()
        service = MovieService(client)  # type: ignore[arg-type]

        first = await service.get_movie(550)
        second = await service.get_movie(550)

        assert first == second == {"id": 550, "title": "Heat"}
        assert client.calls == [("movie", 550)]
        assert 0 < await mock_redis.ttl(movie_details_key(550, "fr-FR")) <= 86400

    async def test_search_cached_per_query_and_page(self, mock_redis: Redis):
        client = FakeMovieClient()
        service = MovieService(client)  # type: ignore[arg-type]

        await service.search("heat")
        await service.search("  HEAT ")
        await service.search("heat", page=2)

        assert client.calls == [("search", ("heat", 1)), ("search", ("heat", 2))]

    async def test_blank_search_skips_upstream(self, mock_redis_unavailable):
        client = FakeMovieClient()
        service = MovieService(client)  # type: ignore[arg-type]

        assert await service.search("   ") == empty_search_result()
        assert client.calls == []

    async def test_works_without_redis(self, mock_redis_unavailable):
        client = FakeMovieClient()
        service = MovieService(client)  # type: ignore[arg-type]

        await service.get_movie(1)
        await service.get_movie(1)

        assert client.calls == [("movie", 1), ("movie", 1)]
