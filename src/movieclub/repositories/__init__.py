"""Repository layer - data access abstraction."""

from src.movieclub.repositories.base import BaseRepository
from src.movieclub.repositories.rating import (
    FavoriteRepository,
    MovieScore,
    RatingRepository,
    RatingRow,
    UnratedMovie,
)
from src.movieclub.repositories.room import MemberRow, RoomRepository, RoomRow
from src.movieclub.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    # Repositories
    "FavoriteRepository",
    "RatingRepository",
    "RoomRepository",
    "UserRepository",
    # Row types
    "MemberRow",
    "MovieScore",
    "RatingRow",
    "RoomRow",
    "UnratedMovie",
]
