"""Movie endpoints - TMDB proxy plus per-movie ratings and rooms."""

from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Path, Query, Response, status

from src.movieclub.api.dependencies import (
    CurrentUser,
    MovieServiceDep,
    RatingServiceDep,
    RoomServiceDep,
)
from src.movieclub.core.logging import get_logger
from src.movieclub.core.movie_metadata import (
    MovieMetadataError,
    MovieMetadataNotConfiguredError,
    MovieMetadataNotFoundError,
)
from src.movieclub.schemas.rating import RatingCreate, RatingRead, TopRatedMovie
from src.movieclub.schemas.room import RoomCreate, RoomDetail

logger = get_logger(__name__)

router = APIRouter(prefix="/movies", tags=["movies"])

MovieId = Annotated[int, Path(ge=1)]

_UPSTREAM_ERRORS: dict[str, Any] = {
    404: {"description": "Movie not found upstream"},
    502: {"description": "Movie metadata provider failed"},
    503: {"description": "Movie metadata provider not configured"},
}


def _metadata_http_error(exc: MovieMetadataError) -> HTTPException:
    if isinstance(exc, MovieMetadataNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    if isinstance(exc, MovieMetadataNotConfiguredError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Movie metadata provider is not configured",
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail="Movie metadata provider unavailable",
    )


def _cache_for(response: Response, ttl: int) -> None:
    response.headers["Cache-Control"] = f"public, max-age={ttl}"


@router.get("/search", responses=_UPSTREAM_ERRORS)
async def search_movies(
    response: Response,
    service: MovieServiceDep,
    query: Annotated[str, Query(max_length=200)] = "",
    page: Annotated[int, Query(ge=1, le=500)] = 1,
) -> dict[str, Any]:
    """Search TMDB by title. Results are cached for an hour."""
    try:
        result = await service.search(query, page)
    except MovieMetadataError as e:
        raise _metadata_http_error(e) from e

    _cache_for(response, service.search_ttl)
    return result


@router.get("/top", response_model=list[TopRatedMovie])
async def top_rated_movies(
    service: RatingServiceDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[TopRatedMovie]:
    """Movies ordered by average club rating."""
    return await service.top_rated(limit)


@router.get("/{movie_id}", responses=_UPSTREAM_ERRORS)
async def get_movie(
    movie_id: MovieId, response: Response, service: MovieServiceDep
) -> dict[str, Any]:
    """TMDB movie details with credits and videos. Cached for a day."""
    try:
        movie = await service.get_movie(movie_id)
    except MovieMetadataError as e:
        raise _metadata_http_error(e) from e

    _cache_for(response, service.details_ttl)
    return movie


@router.get("/{movie_id}/ratings", response_model=list[RatingRead])
async def list_movie_ratings(movie_id: MovieId, service: RatingServiceDep) -> list[RatingRead]:
    return await service.list_for_movie(movie_id)


@router.post(
    "/{movie_id}/ratings",
    response_model=RatingRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Score must be an integer between 0 and 10"},
        401: {"description": "Not authenticated"},
    },
)
async def rate_movie(
    movie_id: MovieId,
    data: RatingCreate,
    current_user: CurrentUser,
    service: RatingServiceDep,
) -> RatingRead:
    """Rate a movie. Rating it again replaces the previous score and comment."""
    return await service.rate(current_user, movie_id, data.score, data.comment)


@router.get("/{movie_id}/rooms", response_model=list[RoomDetail])
async def list_movie_rooms(movie_id: MovieId, service: RoomServiceDep) -> list[RoomDetail]:
    """Every room for the movie, latest session first, with owner and members."""
    return await service.list_for_movie(movie_id)


@router.post(
    "/{movie_id}/rooms",
    response_model=RoomDetail,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error"},
        401: {"description": "Not authenticated"},
    },
)
async def create_movie_room(
    movie_id: MovieId,
    data: RoomCreate,
    current_user: CurrentUser,
    service: RoomServiceDep,
) -> RoomDetail:
    """Schedule a viewing session. The creator becomes its owner."""
    return await service.create_room(
        current_user,
        tmdb_movie_id=movie_id,
        session_datetime=data.session_datetime,
        is_private=data.is_private,
    )
