"""Model exports.

Import from here: `from src.movieclub.models import User, Room`
"""

from src.movieclub.models.enums import ROOM_ROLE_RANK, RoomMemberRole, UserRole, UserStatus
from src.movieclub.models.rating import MAX_SCORE, MIN_SCORE, Favorite, Rating
from src.movieclub.models.room import Room, RoomMember
from src.movieclub.models.user import User

__all__ = [
    # Enums
    "ROOM_ROLE_RANK",
    "RoomMemberRole",
    "UserRole",
    "UserStatus",
    # Models
    "Favorite",
    "Rating",
    "Room",
    "RoomMember",
    "User",
    # Constants
    "MAX_SCORE",
    "MIN_SCORE",
]
