"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenient imports.
"""

# Auth
from src.movieclub.api.dependencies.auth import (
    AdminUser,
    CurrentUser,
    OptionalUser,
    get_current_user,
    get_optional_user,
    require_admin,
)

# Database and shared clients
from src.movieclub.api.dependencies.db import (
    DBSession,
    MovieClient,
    get_database,
    get_db_session,
    get_movie_client,
)

# Repositories
from src.movieclub.api.dependencies.repositories import (
    FavoriteRepo,
    RatingRepo,
    RoomRepo,
    UserRepo,
    get_favorite_repository,
    get_rating_repository,
    get_room_repository,
    get_user_repository,
)

# Services
from src.movieclub.api.dependencies.services import (
    AdminServiceDep,
    AuthServiceDep,
    FavoriteServiceDep,
    MovieServiceDep,
    RatingServiceDep,
    RegistrationServiceDep,
    RoomServiceDep,
    get_admin_service,
    get_auth_service,
    get_favorite_service,
    get_movie_service,
    get_rating_service,
    get_registration_service,
    get_room_service,
)

__all__ = [
    # Database and shared clients
    "DBSession",
    "MovieClient",
    "get_database",
    "get_db_session",
    "get_movie_client",
    # Auth
    "AdminUser",
    "CurrentUser",
    "OptionalUser",
    "get_current_user",
    "get_optional_user",
    "require_admin",
    # Repositories
    "FavoriteRepo",
    "RatingRepo",
    "RoomRepo",
    "UserRepo",
    "get_favorite_repository",
    "get_rating_repository",
    "get_room_repository",
    "get_user_repository",
    # Services
    "AdminServiceDep",
    "AuthServiceDep",
    "FavoriteServiceDep",
    "MovieServiceDep",
    "RatingServiceDep",
    "RegistrationServiceDep",
    "RoomServiceDep",
    "get_admin_service",
    "get_auth_service",
    "get_favorite_service",
    "get_movie_service",
    "get_rating_service",
    "get_registration_service",
    "get_room_service",
]
