"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.movieclub.api.dependencies.db import DBSession
from src.movieclub.repositories import (
    FavoriteRepository,
    RatingRepository,
    RoomRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_room_repository(session: DBSession) -> RoomRepository:
    return RoomRepository(session)


def get_rating_repository(session: DBSession) -> RatingRepository:
    return RatingRepository(session)


def get_favorite_repository(session: DBSession) -> FavoriteRepository:
    return FavoriteRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
RoomRepo = Annotated[RoomRepository, Depends(get_room_repository)]
RatingRepo = Annotated[RatingRepository, Depends(get_rating_repository)]
FavoriteRepo = Annotated[FavoriteRepository, Depends(get_favorite_repository)]
