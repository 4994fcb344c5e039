"""Repository for User entity."""

from sqlalchemy import func, text
from sqlmodel import select

from src.movieclub.models import User
from src.movieclub.repositories.base import BaseRepository

# Arbitrary application-wide key for pg_advisory_xact_lock
_BOOTSTRAP_LOCK_KEY = 724_311_001


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by (already normalized) email address."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with the given email exists."""
        return await self.get_by_email(email) is not None

    async def exists_by_username(self, username: str) -> bool:
        return await self.get_by_username(username) is not None

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(User))
        return int(result.scalar_one())

    async def list_by_status(self, status: str | None = None) -> list[User]:
        """All users, newest first, optionally filtered by status."""
        query = select(User)
        if status is not None:
            query = query.where(User.status == status)
        query = query.order_by(User.created_at.desc(), User.username.asc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def lock_for_bootstrap(self) -> None:
        """Serialize first-user detection for the rest of the transaction.

        Concurrent registrations on an empty table would otherwise both see
        zero users and both become admin. SQLite serializes writers already.
        """
        if self.dialect_name == "postgresql":
            await self.session.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": _BOOTSTRAP_LOCK_KEY},
            )
