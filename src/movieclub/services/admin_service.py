"""Admin service - account approval and user management (admin only)."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.movieclub.core.exceptions import ForbiddenError, InvalidOperationError, NotFoundError
from src.movieclub.core.logging import get_logger
from src.movieclub.models import User, UserStatus
from src.movieclub.repositories import UserRepository

logger = get_logger(__name__)

# Admins may approve (active) or revoke approval (pending); nothing else
ASSIGNABLE_STATUSES = frozenset({UserStatus.ACTIVE, UserStatus.PENDING})


class AdminService:
    """Operations behind the admin-only /users endpoints."""

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def list_users(self, status: UserStatus | None = None) -> list[User]:
        """All users, newest first, optionally filtered by status."""
        return await self.user_repo.list_by_status(status.value if status else None)

    async def set_status(self, user_id: UUID, status: UserStatus) -> User:
        """Approve or un-approve an account.

        Raises:
            InvalidOperationError: status is not active or pending
            NotFoundError: no such user
            ForbiddenError: target is an admin
        """
        if status not in ASSIGNABLE_STATUSES:
            raise InvalidOperationError("Status must be 'active' or 'pending'")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if user.is_admin:
            raise ForbiddenError("Cannot change the status of an administrator")

        previous = user.status
        user.status = status.value
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User status changed",
            target_user_id=str(user.id),
            previous_status=previous,
            status=user.status,
        )
        return user

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a non-admin user.

        Rooms, memberships, ratings and favorites go with it (ON DELETE CASCADE).
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if user.is_admin:
            raise ForbiddenError("Cannot delete an administrator")

        try:
            await self.user_repo.delete(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User deleted", target_user_id=str(user_id))
