"""Favorite endpoints - per-user movie bookmarks."""

from typing import Annotated

from fastapi import APIRouter, Path, Response, status

from src.movieclub.api.dependencies import CurrentUser, FavoriteServiceDep
from src.movieclub.schemas.favorite import FavoriteStatus

router = APIRouter(prefix="/favorites", tags=["favorites"])

MovieId = Annotated[int, Path(ge=1)]


@router.get("/{movie_id}", response_model=FavoriteStatus)
async def get_favorite(
    movie_id: MovieId, current_user: CurrentUser, service: FavoriteServiceDep
) -> FavoriteStatus:
    return await service.status(current_user, movie_id)


@router.post(
    "/{movie_id}",
    response_model=FavoriteStatus,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"description": "Already a favorite"},
        201: {"description": "Added to favorites"},
        401: {"description": "Not authenticated"},
    },
)
async def add_favorite(
    movie_id: MovieId,
    response: Response,
    current_user: CurrentUser,
    service: FavoriteServiceDep,
) -> FavoriteStatus:
    """Mark a movie as favorite. Idempotent."""
    favorite, created = await service.add(current_user, movie_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return favorite


@router.delete("/{movie_id}", response_model=FavoriteStatus)
async def remove_favorite(
    movie_id: MovieId, current_user: CurrentUser, service: FavoriteServiceDep
) -> FavoriteStatus:
    return await service.remove(current_user, movie_id)
