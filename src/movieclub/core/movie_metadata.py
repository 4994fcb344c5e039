"""TMDB HTTP client.

One AsyncClient (and its connection pool) per application; created in the
lifespan and closed on shutdown.
"""

from typing import Any

import httpx

from src.movieclub.core.config import Settings, get_settings
from src.movieclub.core.logging import get_logger

logger = get_logger(__name__)


class MovieMetadataError(Exception):
    """Base error for movie metadata lookups."""


class MovieMetadataNotConfiguredError(MovieMetadataError):
    """TMDB_API_KEY is not set."""


class MovieMetadataNotFoundError(MovieMetadataError):
    """Upstream has no movie with the requested id."""


class MovieMetadataUnavailableError(MovieMetadataError):
    """Upstream failed, timed out or returned something unusable."""


class MovieMetadataClient:
    """Thin async wrapper over the TMDB v3 REST API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "fr-FR",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.language = language
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "MovieMetadataClient":
        settings = settings or get_settings()
        return cls(
            api_key=settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            language=settings.tmdb_language,
            timeout=settings.tmdb_timeout_seconds,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def get_movie(self, movie_id: int) -> dict[str, Any]:
        """Movie details with credits and videos appended."""
        return await self._get(
            f"/movie/{movie_id}",
            {"append_to_response": "credits,videos"},
        )

    async def search_movies(self, query: str, page: int = 1) -> dict[str, Any]:
        """One page of title search results."""
        return await self._get("/search/movie", {"query": query, "page": page})

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise MovieMetadataNotConfiguredError("TMDB_API_KEY is not configured")

        query = {"api_key": self.api_key, "language": self.language, **params}
        try:
            response = await self._client.get(path, params=query)
        except httpx.HTTPError as e:
            logger.warning("TMDB request failed", path=path, error=str(e))
            raise MovieMetadataUnavailableError("Movie metadata service unavailable") from e

        if response.status_code == 404:
            raise MovieMetadataNotFoundError("Movie not found")
        if response.is_error:
            logger.warning("TMDB returned an error", path=path, status_code=response.status_code)
            raise MovieMetadataUnavailableError(
                f"Movie metadata service returned {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MovieMetadataUnavailableError("Movie metadata service returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise MovieMetadataUnavailableError("Unexpected movie metadata payload")
        return payload

    async def aclose(self) -> None:
        await self._client.aclose()
