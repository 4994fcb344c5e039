"""Viewing rooms and their rosters."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from src.movieclub.models.base import utc_now
from src.movieclub.models.enums import RoomMemberRole


class Room(SQLModel, table=True):
    """A scheduled group viewing of one movie."""

    __tablename__ = "rooms"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    tmdb_movie_id: int = Field(index=True)
    session_datetime: datetime = Field(index=True)
    is_private: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)


class RoomMember(SQLModel, table=True):
    """Membership of a user in a room. The owner has a row with role=owner."""

    __tablename__ = "room_members"
    __table_args__ = (
        CheckConstraint(
            "role IN ('member', 'moderator', 'owner')",
            name="ck_room_members_role",
        ),
    )

    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", primary_key=True)
    room_id: UUID = Field(foreign_key="rooms.id", ondelete="CASCADE", primary_key=True)
    role: str = Field(default=RoomMemberRole.MEMBER.value, max_length=20)
    joined_at: datetime = Field(default_factory=utc_now)
