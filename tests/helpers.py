"""Test helper functions for common API and data creation patterns."""

from datetime import datetime, timedelta
from uuid import UUID

from httpx import AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.movieclub.models import Room, RoomMember, User
from src.movieclub.models.base import utc_now
from tests.factories import DEFAULT_TEST_PASSWORD, RoomFactory, RoomMemberFactory

# Movie ids the fake TMDB treats specially
MISSING_MOVIE_ID = 404404
BROKEN_MOVIE_ID = 500500


async def register(
    client: AsyncClient,
    username: str,
    email: str | None = None,
    password: str = DEFAULT_TEST_PASSWORD,
) -> Response:
    """POST /auth/register with sensible defaults."""
    return await client.post(
        "/api/v1/auth/register",
        json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
        },
    )


async def login(client: AsyncClient, email: str, password: str = DEFAULT_TEST_PASSWORD) -> Response:
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def iso_in(**delta: float) -> str:
    """ISO timestamp relative to now, e.g. iso_in(days=2) or iso_in(hours=-3)."""
    return (utc_now() + timedelta(**delta)).isoformat()


async def create_room_with_owner(
    session: AsyncSession,
    owner_id: UUID | str,
    *,
    session_datetime: datetime | None = None,
    **room_kwargs,
) -> Room:
    """Insert a room plus its owner membership, bypassing the API.

    Useful for past sessions, which the API happily accepts but tests want
    to place precisely.
    """
    if session_datetime is not None:
        room_kwargs["session_datetime"] = session_datetime
    owner_id = UUID(str(owner_id))
    room = RoomFactory.build(owner_id=owner_id, **room_kwargs)
    session.add(room)
    await session.flush()
    session.add(RoomMemberFactory.owner(user_id=owner_id, room_id=room.id))
    await session.commit()
    return room


async def add_member(
    session: AsyncSession, room: Room, user: User | UUID | str, role: str = "member"
) -> RoomMember:
    """Add a membership row directly."""
    user_id = user.id if isinstance(user, User) else UUID(str(user))
    member = RoomMemberFactory.build(user_id=user_id, room_id=room.id, role=role)
    session.add(member)
    await session.commit()
    return member
