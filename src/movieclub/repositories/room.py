"""Repository for rooms and room memberships."""

from collections.abc import Sequence
from datetime import datetime
from typing import NamedTuple
from uuid import UUID

from sqlalchemy import case, delete, func
from sqlmodel import select

from src.movieclub.models import ROOM_ROLE_RANK, Room, RoomMember, User
from src.movieclub.repositories.base import BaseRepository


class MemberRow(NamedTuple):
    user_id: UUID
    username: str
    role: str
    joined_at: datetime


class RoomRow(NamedTuple):
    room: Room
    owner_username: str
    members_count: int


# Unknown roles sort after every known one
_role_rank = case(ROOM_ROLE_RANK, value=RoomMember.role, else_=len(ROOM_ROLE_RANK))


def _members_count():
    return (
        select(func.count())
        .select_from(RoomMember)
        .where(RoomMember.room_id == Room.id)
        .correlate(Room)
        .scalar_subquery()
    )


class RoomRepository(BaseRepository[Room]):
    """Rooms plus their rosters. Membership rows live in room_members."""

    model = Room

    async def get_row(self, room_id: UUID) -> RoomRow | None:
        """Room with owner username and member count."""
        query = (
            select(Room, User.username, _members_count())
            .join(User, User.id == Room.owner_id)
            .where(Room.id == room_id)
        )
        result = await self.session.execute(query)
        row = result.one_or_none()
        return RoomRow(*row) if row is not None else None

    async def list_upcoming(self, now: datetime, limit: int) -> list[RoomRow]:
        """Rooms whose session is strictly after now, soonest first."""
        query = (
            select(Room, User.username, _members_count())
            .join(User, User.id == Room.owner_id)
            .where(Room.session_datetime > now)
            .order_by(Room.session_datetime.asc(), Room.id.asc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [RoomRow(*row) for row in result.all()]

    async def list_for_movie(self, tmdb_movie_id: int) -> list[RoomRow]:
        """Every room for a movie, past and future, latest session first."""
        query = (
            select(Room, User.username, _members_count())
            .join(User, User.id == Room.owner_id)
            .where(Room.tmdb_movie_id == tmdb_movie_id)
            .order_by(Room.session_datetime.desc(), Room.id.asc())
        )
        result = await self.session.execute(query)
        return [RoomRow(*row) for row in result.all()]

    async def list_members(self, room_ids: Sequence[UUID]) -> dict[UUID, list[MemberRow]]:
        """Rosters keyed by room id, ordered owner, moderator, member, then username."""
        rosters: dict[UUID, list[MemberRow]] = {room_id: [] for room_id in room_ids}
        if not rosters:
            return rosters

        query = (
            select(
                RoomMember.room_id,
                RoomMember.user_id,
                User.username,
                RoomMember.role,
                RoomMember.joined_at,
            )
            .join(User, User.id == RoomMember.user_id)
            .where(RoomMember.room_id.in_(list(rosters)))  # type: ignore[attr-defined]
            .order_by(_role_rank, User.username.asc())
        )
        result = await self.session.execute(query)
        for room_id, user_id, username, role, joined_at in result.all():
            rosters[room_id].append(MemberRow(user_id, username, role, joined_at))
        return rosters

    async def get_member(self, room_id: UUID, user_id: UUID) -> RoomMember | None:
        result = await self.session.execute(
            select(RoomMember).where(
                RoomMember.room_id == room_id,
                RoomMember.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def member_room_ids(self, user_id: UUID, room_ids: Sequence[UUID]) -> set[UUID]:
        """Subset of room_ids the user belongs to."""
        if not room_ids:
            return set()
        result = await self.session.execute(
            select(RoomMember.room_id).where(
                RoomMember.user_id == user_id,
                RoomMember.room_id.in_(list(room_ids)),  # type: ignore[attr-defined]
            )
        )
        return set(result.scalars().all())

    def add_member(self, member: RoomMember) -> None:
        self.session.add(member)

    async def remove_member(self, room_id: UUID, user_id: UUID) -> int:
        """Delete one membership row. Returns the number of rows removed."""
        result = await self.session.execute(
            delete(RoomMember).where(
                RoomMember.room_id == room_id,  # type: ignore[arg-type]
                RoomMember.user_id == user_id,  # type: ignore[arg-type]
            )
        )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]

    async def remove_all_members(self, room_id: UUID) -> None:
        await self.session.execute(
            delete(RoomMember).where(RoomMember.room_id == room_id)  # type: ignore[arg-type]
        )
