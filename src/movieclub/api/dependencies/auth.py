"""Authentication and authorization dependencies."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.movieclub.api.dependencies.db import DBSession
from src.movieclub.api.dependencies.repositories import UserRepo
from src.movieclub.core.logging import bind_user_context
from src.movieclub.core.security import resolve_token
from src.movieclub.models import User
from src.movieclub.services.user_service import UserService

_BEARER_PREFIX = "Bearer "


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_bearer(authorization: str | None) -> str | None:
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX) :].strip()
    return token or None


async def get_current_user(
    session: DBSession,
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Validate the bearer token and return the active user it names.

    Role and status are re-read from the database on every request, so an
    approval or demotion takes effect immediately.
    """
    token = _extract_bearer(authorization)
    if token is None:
        raise _unauthorized("Missing or invalid authorization header")

    user_id = resolve_token(token)
    if user_id is None:
        raise _unauthorized("Invalid or expired token")

    user = await UserService(user_repo, session).get_active_by_id(user_id)
    if user is None:
        raise _unauthorized("User not found or inactive")

    bind_user_context(user.id, user.username, user.role)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_optional_user(
    session: DBSession,
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> User | None:
    """Like get_current_user, but anonymous or invalid credentials yield None."""
    token = _extract_bearer(authorization)
    if token is None:
        return None

    user_id = resolve_token(token)
    if user_id is None:
        return None

    user = await UserService(user_repo, session).get_active_by_id(user_id)
    if user is not None:
        bind_user_context(user.id, user.username, user.role)
    return user


OptionalUser = Annotated[User | None, Depends(get_optional_user)]


async def require_admin(user: CurrentUser) -> User:
    """Require the current user to be an administrator."""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator privileges required",
        )
    return user


AdminUser = Annotated[User, Depends(require_admin)]
