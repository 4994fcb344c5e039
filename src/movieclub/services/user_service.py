from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.movieclub.models import User
from src.movieclub.repositories import UserRepository


class UserService:
    """User lookups for request authentication."""

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        return await self.user_repo.get_by_id(user_id)

    async def get_active_by_id(self, user_id: UUID) -> User | None:
        """The user if it exists and may use the API, else None.

        Role and status are read fresh on every call.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            return None
        return user
