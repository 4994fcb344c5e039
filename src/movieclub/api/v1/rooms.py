"""Room endpoints - viewing sessions and memberships."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.movieclub.api.dependencies import CurrentUser, OptionalUser, RoomServiceDep
from src.movieclub.core.exceptions import ForbiddenError, InvalidOperationError, NotFoundError
from src.movieclub.schemas.room import (
    MembershipResponse,
    RoomDeleteResponse,
    RoomDetail,
    UpcomingRoom,
)

router = APIRouter(prefix="/rooms", tags=["rooms"])

_NOT_FOUND = {404: {"description": "Room not found"}}


@router.get("/upcoming", response_model=list[UpcomingRoom])
async def upcoming_rooms(
    service: RoomServiceDep,
    user: OptionalUser,
    limit: Annotated[int, Query(ge=1, le=50)] = 3,
) -> list[UpcomingRoom]:
    """Next scheduled sessions, soonest first.

    With a valid bearer token each room also says whether the caller is a
    member. A bad token is ignored rather than rejected.
    """
    return await service.list_upcoming(limit, user)


@router.get("/{room_id}", response_model=RoomDetail, responses=_NOT_FOUND)
async def get_room(room_id: UUID, service: RoomServiceDep) -> RoomDetail:
    try:
        return await service.get_room(room_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete(
    "/{room_id}",
    response_model=RoomDeleteResponse,
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Only the room owner can delete this room"},
        **_NOT_FOUND,
    },
)
async def delete_room(
    room_id: UUID, current_user: CurrentUser, service: RoomServiceDep
) -> RoomDeleteResponse:
    try:
        await service.delete_room(room_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e

    return RoomDeleteResponse()


@router.post(
    "/{room_id}/join",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "User is already a member of this room"},
        401: {"description": "Not authenticated"},
        **_NOT_FOUND,
    },
)
async def join_room(
    room_id: UUID, current_user: CurrentUser, service: RoomServiceDep
) -> MembershipResponse:
    try:
        await service.join(current_user, room_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidOperationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return MembershipResponse(message="Joined room")


@router.delete(
    "/{room_id}/join",
    response_model=MembershipResponse,
    responses={
        400: {"description": "Room owner cannot leave the room"},
        401: {"description": "Not authenticated"},
        **_NOT_FOUND,
    },
)
async def leave_room(
    room_id: UUID, current_user: CurrentUser, service: RoomServiceDep
) -> MembershipResponse:
    try:
        await service.leave(current_user, room_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidOperationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return MembershipResponse(message="Left room")
