from src.movieclub.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from src.movieclub.schemas.favorite import FavoriteStatus
from src.movieclub.schemas.rating import RatingCreate, RatingRead, TopRatedMovie, UnratedMovieRead
from src.movieclub.schemas.room import (
    MembershipResponse,
    RoomCreate,
    RoomDeleteResponse,
    RoomDetail,
    RoomMemberRead,
    RoomOwner,
    RoomRead,
    UpcomingRoom,
)
from src.movieclub.schemas.user import UserDeleteResponse, UserRead, UserStatusUpdate

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    # Favorite
    "FavoriteStatus",
    # Rating
    "RatingCreate",
    "RatingRead",
    "TopRatedMovie",
    "UnratedMovieRead",
    # Room
    "MembershipResponse",
    "RoomCreate",
    "RoomDeleteResponse",
    "RoomDetail",
    "RoomMemberRead",
    "RoomOwner",
    "RoomRead",
    "UpcomingRoom",
    # User
    "UserDeleteResponse",
    "UserRead",
    "UserStatusUpdate",
]
