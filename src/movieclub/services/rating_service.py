"""Rating service - per-user movie scores and aggregate views."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.movieclub.core.logging import get_logger
from src.movieclub.models import User
from src.movieclub.models.base import utc_now
from src.movieclub.repositories import RatingRepository, RatingRow
from src.movieclub.schemas.rating import RatingRead, TopRatedMovie, UnratedMovieRead

logger = get_logger(__name__)

UNRATED_MOVIES_LIMIT = 5


def _to_read(row: RatingRow) -> RatingRead:
    rating = row.rating
    return RatingRead(
        id=rating.id,
        user_id=rating.user_id,
        username=row.username,
        tmdb_movie_id=rating.tmdb_movie_id,
        score=rating.score,
        comment=rating.comment,
        created_at=rating.created_at,
    )


class RatingService:
    def __init__(self, rating_repo: RatingRepository, session: AsyncSession):
        self.rating_repo = rating_repo
        self.session = session

    async def rate(
        self,
        user: User,
        tmdb_movie_id: int,
        score: int,
        comment: str | None = None,
    ) -> RatingRead:
        """Create the user's rating or overwrite score and comment in place."""
        try:
            rating = await self.rating_repo.upsert(user.id, tmdb_movie_id, score, comment)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Movie rated",
            user_id=str(user.id),
            tmdb_movie_id=tmdb_movie_id,
            score=score,
        )
        return _to_read(RatingRow(rating, user.username))

    async def list_for_movie(self, tmdb_movie_id: int) -> list[RatingRead]:
        return [_to_read(row) for row in await self.rating_repo.list_for_movie(tmdb_movie_id)]

    async def latest(self, limit: int) -> list[RatingRead]:
        return [_to_read(row) for row in await self.rating_repo.latest(limit)]

    async def top_rated(self, limit: int) -> list[TopRatedMovie]:
        scores = await self.rating_repo.top_rated(limit)
        return [TopRatedMovie(**score._asdict()) for score in scores]

    async def unrated_for_user(
        self, user: User, limit: int = UNRATED_MOVIES_LIMIT
    ) -> list[UnratedMovieRead]:
        """Past sessions the user attended whose movie they have not rated."""
        movies = await self.rating_repo.unrated_for_user(user.id, utc_now(), limit)
        return [UnratedMovieRead(**movie._asdict()) for movie in movies]
