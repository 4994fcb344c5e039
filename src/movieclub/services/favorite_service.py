from sqlalchemy.ext.asyncio import AsyncSession

from src.movieclub.core.logging import get_logger
from src.movieclub.models import User
from src.movieclub.repositories import FavoriteRepository
from src.movieclub.schemas.favorite import FavoriteStatus

logger = get_logger(__name__)


class FavoriteService:
    """Idempotent per-(user, movie) favorite flag."""

    def __init__(self, favorite_repo: FavoriteRepository, session: AsyncSession):
        self.favorite_repo = favorite_repo
        self.session = session

    async def status(self, user: User, tmdb_movie_id: int) -> FavoriteStatus:
        is_favorite = await self.favorite_repo.exists(user.id, tmdb_movie_id)
        return FavoriteStatus(tmdb_movie_id=tmdb_movie_id, is_favorite=is_favorite)

    async def add(self, user: User, tmdb_movie_id: int) -> tuple[FavoriteStatus, bool]:
        """Mark as favorite. Returns (status, created); created is False if it already was."""
        try:
            created = await self.favorite_repo.add_if_absent(user.id, tmdb_movie_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if created:
            logger.info("Favorite added", user_id=str(user.id), tmdb_movie_id=tmdb_movie_id)
        return FavoriteStatus(tmdb_movie_id=tmdb_movie_id, is_favorite=True), created

    async def remove(self, user: User, tmdb_movie_id: int) -> FavoriteStatus:
        try:
            await self.favorite_repo.remove(user.id, tmdb_movie_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return FavoriteStatus(tmdb_movie_id=tmdb_movie_id, is_favorite=False)
