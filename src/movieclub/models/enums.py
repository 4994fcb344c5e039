"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Platform-wide role of a user."""

    USER = "user"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """Account lifecycle. Only active accounts may sign in."""

    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


class RoomMemberRole(str, Enum):
    """Role of a user inside a room."""

    OWNER = "owner"
    MODERATOR = "moderator"
    MEMBER = "member"


# Display order for room rosters: owner first, then moderators, then members
ROOM_ROLE_RANK: dict[str, int] = {
    RoomMemberRole.OWNER.value: 0,
    RoomMemberRole.MODERATOR.value: 1,
    RoomMemberRole.MEMBER.value: 2,
}
