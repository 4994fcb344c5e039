"""User endpoints - admin account management and the caller's unrated movies."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.movieclub.api.dependencies import (
    AdminServiceDep,
    AdminUser,
    CurrentUser,
    RatingServiceDep,
)
from src.movieclub.core.exceptions import ForbiddenError, InvalidOperationError, NotFoundError
from src.movieclub.models import UserStatus
from src.movieclub.schemas.rating import UnratedMovieRead
from src.movieclub.schemas.user import UserDeleteResponse, UserRead, UserStatusUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=list[UserRead],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Administrator privileges required"},
    },
)
async def list_users(
    admin: AdminUser,
    service: AdminServiceDep,
    user_status: Annotated[UserStatus | None, Query(alias="status")] = None,
) -> list[UserRead]:
    """List every account, newest first. Filter with `?status=pending` for the approval queue."""
    users = await service.list_users(user_status)
    return [UserRead.model_validate(user) for user in users]


@router.get(
    "/unrated-movies",
    response_model=list[UnratedMovieRead],
    responses={
        200: {
            "description": "Movies seen in past sessions that the caller has not rated",
            "content": {
                "application/json": {
                    "example": [{"tmdb_movie_id": 603, "session_datetime": "2024-03-01T20:30:00"}]
                }
            },
        },
        401: {"description": "Not authenticated"},
    },
)
async def unrated_movies(current_user: CurrentUser, service: RatingServiceDep) -> list[UnratedMovieRead]:
    return await service.unrated_for_user(current_user)


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    responses={
        400: {"description": "Status must be 'active' or 'pending'"},
        401: {"description": "Not authenticated"},
        403: {"description": "Caller is not an administrator, or target is one"},
        404: {"description": "User not found"},
    },
)
async def update_user_status(
    user_id: UUID,
    data: UserStatusUpdate,
    admin: AdminUser,
    service: AdminServiceDep,
) -> UserRead:
    """Approve (`active`) or revoke approval (`pending`) of an account."""
    try:
        user = await service.set_status(user_id, data.status)
    except InvalidOperationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e

    return UserRead.model_validate(user)


@router.delete(
    "/{user_id}",
    response_model=UserDeleteResponse,
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Caller is not an administrator, or target is one"},
        404: {"description": "User not found"},
    },
)
async def delete_user(user_id: UUID, admin: AdminUser, service: AdminServiceDep) -> UserDeleteResponse:
    """Delete an account together with its rooms, memberships, ratings and favorites."""
    try:
        await service.delete_user(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e

    return UserDeleteResponse()
