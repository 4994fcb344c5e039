"""Database session and shared client dependencies.

The Database and MovieMetadataClient instances are owned by the application
(app.state) and handed to requests from there.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.movieclub.core.db import Database
from src.movieclub.core.movie_metadata import MovieMetadataClient


def get_database(request: Request) -> Database:
    return request.app.state.database  # type: ignore[no-any-return]


async def get_db_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession]:
    """One session per request, closed when the response is done."""
    async with database.session() as session:
        yield session


def get_movie_client(request: Request) -> MovieMetadataClient:
    return request.app.state.movie_client  # type: ignore[no-any-return]


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
MovieClient = Annotated[MovieMetadataClient, Depends(get_movie_client)]
