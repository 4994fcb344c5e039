"""Room service - viewing sessions and their rosters."""

from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.movieclub.core.exceptions import ForbiddenError, InvalidOperationError, NotFoundError
from src.movieclub.core.logging import get_logger
from src.movieclub.models import Room, RoomMember, RoomMemberRole, User
from src.movieclub.models.base import to_naive_utc, utc_now
from src.movieclub.repositories import MemberRow, RoomRepository, RoomRow
from src.movieclub.schemas.room import (
    RoomDetail,
    RoomMemberRead,
    RoomOwner,
    UpcomingRoom,
)

logger = get_logger(__name__)

ALREADY_MEMBER = "User is already a member of this room"
ROOM_NOT_FOUND = "Room not found"


def _room_fields(row: RoomRow) -> dict:
    room = row.room
    return {
        "id": room.id,
        "tmdb_movie_id": room.tmdb_movie_id,
        "session_datetime": room.session_datetime,
        "is_private": room.is_private,
        "created_at": room.created_at,
        "owner": RoomOwner(id=room.owner_id, username=row.owner_username),
        "members_count": row.members_count,
    }


def _to_detail(row: RoomRow, members: list[MemberRow]) -> RoomDetail:
    return RoomDetail(
        **_room_fields(row),
        members=[
            RoomMemberRead(
                user_id=m.user_id,
                username=m.username,
                role=RoomMemberRole(m.role),
                joined_at=m.joined_at,
            )
            for m in members
        ],
    )


class RoomService:
    """Creates, lists, joins, leaves and deletes rooms.

    Invariants: every room has exactly one owner membership created with it,
    and a user holds at most one membership per room.
    """

    def __init__(self, room_repo: RoomRepository, session: AsyncSession):
        self.room_repo = room_repo
        self.session = session

    async def create_room(
        self,
        owner: User,
        tmdb_movie_id: int,
        session_datetime: datetime,
        is_private: bool = False,
    ) -> RoomDetail:
        """Create a room and its owner membership in a single transaction."""
        room = Room(
            owner_id=owner.id,
            tmdb_movie_id=tmdb_movie_id,
            session_datetime=to_naive_utc(session_datetime),
            is_private=is_private,
        )
        try:
            self.room_repo.add(room)
            await self.session.flush()
            self.room_repo.add_member(
                RoomMember(
                    user_id=owner.id,
                    room_id=room.id,
                    role=RoomMemberRole.OWNER.value,
                )
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Room created",
            room_id=str(room.id),
            tmdb_movie_id=tmdb_movie_id,
            owner_id=str(owner.id),
        )
        return await self.get_room(room.id)

    async def get_room(self, room_id: UUID) -> RoomDetail:
        row = await self.room_repo.get_row(room_id)
        if row is None:
            raise NotFoundError(ROOM_NOT_FOUND)
        rosters = await self.room_repo.list_members([room_id])
        return _to_detail(row, rosters[room_id])

    async def list_for_movie(self, tmdb_movie_id: int) -> list[RoomDetail]:
        """All rooms for a movie, latest session first, with rosters."""
        rows = await self.room_repo.list_for_movie(tmdb_movie_id)
        rosters = await self.room_repo.list_members([row.room.id for row in rows])
        return [_to_detail(row, rosters[row.room.id]) for row in rows]

    async def list_upcoming(self, limit: int, user: User | None = None) -> list[UpcomingRoom]:
        """Rooms scheduled after now, soonest first.

        is_user_member is filled in only for an identified caller.
        """
        rows = await self.room_repo.list_upcoming(utc_now(), limit)

        member_of: set[UUID] = set()
        if user is not None:
            member_of = await self.room_repo.member_room_ids(
                user.id, [row.room.id for row in rows]
            )

        return [
            UpcomingRoom(
                **_room_fields(row),
                is_user_member=(row.room.id in member_of) if user is not None else None,
            )
            for row in rows
        ]

    async def join(self, user: User, room_id: UUID) -> None:
        """Add user to the room as a plain member.

        Raises NotFoundError for an unknown room and InvalidOperationError
        when the user already belongs to it.
        """
        room = await self.room_repo.get_by_id(room_id)
        if room is None:
            raise NotFoundError(ROOM_NOT_FOUND)

        if await self.room_repo.get_member(room_id, user.id) is not None:
            raise InvalidOperationError(ALREADY_MEMBER)

        self.room_repo.add_member(
            RoomMember(user_id=user.id, room_id=room_id, role=RoomMemberRole.MEMBER.value)
        )
        try:
            await self.session.commit()
        except IntegrityError as e:
            # Concurrent join won the primary key
            await self.session.rollback()
            raise InvalidOperationError(ALREADY_MEMBER) from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Room joined", room_id=str(room_id), user_id=str(user.id))

    async def leave(self, user: User, room_id: UUID) -> None:
        """Remove user's membership. Leaving a room one is not in is a no-op.

        The owner cannot leave; they delete the room instead.
        """
        room = await self.room_repo.get_by_id(room_id)
        if room is None:
            raise NotFoundError(ROOM_NOT_FOUND)
        if room.owner_id == user.id:
            raise InvalidOperationError("Room owner cannot leave the room; delete it instead")

        try:
            removed = await self.room_repo.remove_member(room_id, user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if removed:
            logger.info("Room left", room_id=str(room_id), user_id=str(user.id))

    async def delete_room(self, room_id: UUID, requester: User) -> None:
        """Delete a room and its memberships. Owner only."""
        room = await self.room_repo.get_by_id(room_id)
        if room is None:
            raise NotFoundError(ROOM_NOT_FOUND)
        if room.owner_id != requester.id:
            raise ForbiddenError("Only the room owner can delete this room")

        try:
            await self.room_repo.remove_all_members(room_id)
            await self.room_repo.delete(room)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Room deleted", room_id=str(room_id), owner_id=str(requester.id))
