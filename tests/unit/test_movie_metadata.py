"""Tests for the TMDB client error mapping."""

import httpx
import pytest

from src.movieclub.core.movie_metadata import (
    MovieMetadataClient,
    MovieMetadataNotConfiguredError,
    MovieMetadataNotFoundError,
    MovieMetadataUnavailableError,
)

pytestmark = pytest.mark.unit


def _client(handler, api_key: str | None = "key-123") -> MovieMetadataClient:
    return MovieMetadataClient(
        api_key=api_key,
        base_url="https://tmdb.test/3",
        language="fr-FR",
        transport=httpx.MockTransport(handler),
    )


async def test_get_movie_sends_key_language_and_appends():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": 550})

    client = _client(handler)
    try:
        assert await client.get_movie(550) == {"id": 550}
    finally:
        await client.aclose()

    params = seen[0].url.params
    assert seen[0].url.path == "/3/movie/550"
    assert params["api_key"] == "key-123"
    assert params["language"] == "fr-FR"
    assert params["append_to_response"] == "credits,videos"


async def test_search_sends_query_and_page():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"page": 2, "results": []})

    client = _client(handler)
    try:
        await client.search_movies("la haine", page=2)
    finally:
        await client.aclose()

    assert seen[0].url.path == "/3/search/movie"
    assert seen[0].url.params["query"] == "la haine"
    assert seen[0].url.params["page"] == "2"


@pytest.mark.parametrize(
    ("response", "error"),
    [
        (httpx.Response(404), MovieMetadataNotFoundError),
        (httpx.Response(500), MovieMetadataUnavailableError),
        (httpx.Response(401), MovieMetadataUnavailableError),
        (httpx.Response(200, content=b"<html>"), MovieMetadataUnavailableError),
        (httpx.Response(200, json=[1, 2, 3]), MovieMetadataUnavailableError),
    ],
)
async def test_upstream_failures_mapped(response: httpx.Response, error: type[Exception]):
    client = _client(lambda request: response)
    try:
        with pytest.raises(error):
            await client.get_movie(1)
    finally:
        await client.aclose()


async def test_transport_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = _client(handler)
    try:
        with pytest.raises(MovieMetadataUnavailableError):
            await client.get_movie(1)
    finally:
        await client.aclose()


async def test_missing_api_key_never_calls_upstream():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client = _client(handler, api_key=None)
    try:
        assert client.is_configured is False
        with pytest.raises(MovieMetadataNotConfiguredError):
            await client.search_movies("heat")
    finally:
        await client.aclose()

    assert calls == []
