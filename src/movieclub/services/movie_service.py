"""Movie metadata proxy - TMDB lookups behind a read-through cache."""

from typing import Any

from src.movieclub.core.cache import (
    get_cached_json,
    movie_details_key,
    movie_search_key,
    set_cached_json,
)
from src.movieclub.core.config import get_settings
from src.movieclub.core.logging import get_logger
from src.movieclub.core.movie_metadata import MovieMetadataClient

logger = get_logger(__name__)


def empty_search_result() -> dict[str, Any]:
    return {"page": 1, "results": [], "total_pages": 0, "total_results": 0}


class MovieService:
    """Serves TMDB payloads, caching details for a day and searches for an hour."""

    def __init__(self, client: MovieMetadataClient):
        self.client = client
        settings = get_settings()
        self.details_ttl = settings.movie_details_cache_ttl
        self.search_ttl = settings.movie_search_cache_ttl

    async def get_movie(self, movie_id: int) -> dict[str, Any]:
        """Movie details. Raises the client's MovieMetadata* errors on failure."""
        key = movie_details_key(movie_id, self.client.language)
        cached = await get_cached_json(key)
        if cached is not None:
            return cached  # type: ignore[no-any-return]

        payload = await self.client.get_movie(movie_id)
        await set_cached_json(key, payload, self.details_ttl)
        return payload

    async def search(self, query: str, page: int = 1) -> dict[str, Any]:
        """Search by title. A blank query returns an empty page without calling TMDB."""
        query = query.strip()
        if not query:
            return empty_search_result()

        key = movie_search_key(query, page, self.client.language)
        cached = await get_cached_json(key)
        if cached is not None:
            return cached  # type: ignore[no-any-return]

        payload = await self.client.search_movies(query, page)
        await set_cached_json(key, payload, self.search_ttl)
        return payload
