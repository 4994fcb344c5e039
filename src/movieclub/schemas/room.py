from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.movieclub.models.enums import RoomMemberRole


class RoomCreate(BaseModel):
    session_datetime: datetime
    is_private: bool = False


class RoomOwner(BaseModel):
    id: UUID
    username: str


class RoomMemberRead(BaseModel):
    user_id: UUID
    username: str
    role: RoomMemberRole
    joined_at: datetime


class RoomRead(BaseModel):
    id: UUID
    tmdb_movie_id: int
    session_datetime: datetime
    is_private: bool
    created_at: datetime
    owner: RoomOwner
    members_count: int


class RoomDetail(RoomRead):
    members: list[RoomMemberRead]


class UpcomingRoom(RoomRead):
    # None for anonymous callers
    is_user_member: bool | None = None


class MembershipResponse(BaseModel):
    success: bool = True
    message: str


class RoomDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Room deleted"
