"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file (foreign keys enforced) and a
TMDB client backed by httpx.MockTransport. Both are injected into the app.
"""

import json
from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.movieclub.core import redis as redis_core
from src.movieclub.core.db import Database
from src.movieclub.core.health import reset_health_cache
from src.movieclub.core.movie_metadata import MovieMetadataClient
from src.movieclub.core.security import create_access_token
from src.movieclub.core.shutdown import request_tracker
from src.movieclub.main import create_app
from src.movieclub.models import User
from tests.factories import DEFAULT_TEST_PASSWORD, UserFactory
from tests.helpers import BROKEN_MOVIE_ID, MISSING_MOVIE_ID


@pytest.fixture(autouse=True)
async def _reset_shared_state() -> AsyncGenerator[None]:
    """Module-level state (Redis client, health cache, tracker) must not leak between tests."""
    redis_core.reset_redis_state()
    reset_health_cache()
    request_tracker.reset()
    yield
    await redis_core.close_redis()
    reset_health_cache()
    request_tracker.reset()


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database]:
    """Fresh SQLite database with every table created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'movieclub.db'}", poolclass=NullPool)
    async with db.engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession]:
    """Session for arranging data. Tests must commit what they add."""
    async with database.session() as session:
        yield session


@pytest.fixture
def tmdb_requests() -> list[httpx.Request]:
    """Every request the fake TMDB received, in order."""
    return []


@pytest.fixture
def tmdb_transport(tmdb_requests: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        tmdb_requests.append(request)
        path = request.url.path

        if path.endswith("/search/movie"):
            query = request.url.params.get("query", "")
            page = int(request.url.params.get("page", "1"))
            return httpx.Response(
                200,
                json={
                    "page": page,
                    "results": [{"id": 603, "title": query}],
                    "total_pages": 1,
                    "total_results": 1,
                },
            )

        if "/movie/" in path:
            movie_id = int(path.rsplit("/", 1)[-1])
            if movie_id == MISSING_MOVIE_ID:
                return httpx.Response(404, json={"status_message": "not found"})
            if movie_id == BROKEN_MOVIE_ID:
                return httpx.Response(500, content=b"upstream exploded")
            return httpx.Response(
                200,
                content=json.dumps(
                    {
                        "id": movie_id,
                        "title": f"Movie {movie_id}",
                        "language": request.url.params.get("language"),
                        "credits": {"cast": []},
                        "videos": {"results": []},
                    }
                ).encode(),
                headers={"Content-Type": "application/json"},
            )

        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest.fixture
async def movie_client(tmdb_transport: httpx.MockTransport) -> AsyncGenerator[MovieMetadataClient]:
    client = MovieMetadataClient(
        api_key="test-tmdb-key",
        base_url="https://tmdb.test/3",
        language="fr-FR",
        transport=tmdb_transport,
    )
    yield client
    await client.aclose()


@pytest.fixture
async def client(
    database: Database, movie_client: MovieMetadataClient
) -> AsyncGenerator[AsyncClient]:
    """HTTP client against an app wired to the test database and fake TMDB."""
    app = create_app(database=database, movie_client=movie_client)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


async def _persist(session: AsyncSession, user: User) -> dict:
    session.add(user)
    await session.commit()
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "password": DEFAULT_TEST_PASSWORD,
        "headers": {"Authorization": f"Bearer {create_access_token(user.id)}"},
    }


@pytest.fixture
async def test_admin(db_session: AsyncSession) -> dict:
    """Active administrator with ready-made auth headers."""
    return await _persist(db_session, UserFactory.admin(username="admin"))


@pytest.fixture
async def test_user(db_session: AsyncSession) -> dict:
    """Active plain user with ready-made auth headers."""
    return await _persist(db_session, UserFactory.build(username="alice"))


@pytest.fixture
async def other_user(db_session: AsyncSession) -> dict:
    return await _persist(db_session, UserFactory.build(username="bob"))
