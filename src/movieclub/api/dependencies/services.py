"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.movieclub.api.dependencies.db import DBSession, MovieClient
from src.movieclub.api.dependencies.repositories import (
    FavoriteRepo,
    RatingRepo,
    RoomRepo,
    UserRepo,
)
from src.movieclub.services import (
    AdminService,
    AuthService,
    FavoriteService,
    MovieService,
    RatingService,
    RegistrationService,
    RoomService,
)


def get_auth_service(user_repo: UserRepo, session: DBSession) -> AuthService:
    return AuthService(user_repo, session)


def get_registration_service(user_repo: UserRepo, session: DBSession) -> RegistrationService:
    return RegistrationService(user_repo, session)


def get_admin_service(user_repo: UserRepo, session: DBSession) -> AdminService:
    return AdminService(user_repo, session)


def get_room_service(room_repo: RoomRepo, session: DBSession) -> RoomService:
    return RoomService(room_repo, session)


def get_rating_service(rating_repo: RatingRepo, session: DBSession) -> RatingService:
    return RatingService(rating_repo, session)


def get_favorite_service(favorite_repo: FavoriteRepo, session: DBSession) -> FavoriteService:
    return FavoriteService(favorite_repo, session)


def get_movie_service(client: MovieClient) -> MovieService:
    return MovieService(client)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
RoomServiceDep = Annotated[RoomService, Depends(get_room_service)]
RatingServiceDep = Annotated[RatingService, Depends(get_rating_service)]
FavoriteServiceDep = Annotated[FavoriteService, Depends(get_favorite_service)]
MovieServiceDep = Annotated[MovieService, Depends(get_movie_service)]
