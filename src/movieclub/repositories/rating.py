"""Repositories for ratings and favorites."""

from datetime import datetime
from typing import NamedTuple
from uuid import UUID, uuid4

from sqlalchemy import delete, func
from sqlmodel import select

from src.movieclub.models import Favorite, Rating, Room, RoomMember, User
from src.movieclub.models.base import utc_now
from src.movieclub.repositories.base import BaseRepository


class RatingRow(NamedTuple):
    rating: Rating
    username: str


class MovieScore(NamedTuple):
    tmdb_movie_id: int
    average_rating: float
    rating_count: int


class UnratedMovie(NamedTuple):
    tmdb_movie_id: int
    session_datetime: datetime


class RatingRepository(BaseRepository[Rating]):
    """One rating per (user, movie), enforced by uq_ratings_user_movie."""

    model = Rating

    async def upsert(
        self,
        user_id: UUID,
        tmdb_movie_id: int,
        score: int,
        comment: str | None,
    ) -> Rating:
        """Insert or overwrite the user's rating for a movie in one statement."""
        stmt = self.upsert_statement().values(
            id=uuid4(),
            user_id=user_id,
            tmdb_movie_id=tmdb_movie_id,
            score=score,
            comment=comment,
            created_at=utc_now(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "tmdb_movie_id"],
            set_={"score": stmt.excluded.score, "comment": stmt.excluded.comment},
        ).returning(Rating)

        result = await self.session.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        return result.one()

    async def get_for_user(self, user_id: UUID, tmdb_movie_id: int) -> Rating | None:
        result = await self.session.execute(
            select(Rating).where(
                Rating.user_id == user_id,
                Rating.tmdb_movie_id == tmdb_movie_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_movie(self, tmdb_movie_id: int) -> list[RatingRow]:
        """Ratings for a movie with author usernames, newest first."""
        query = (
            select(Rating, User.username)
            .join(User, User.id == Rating.user_id)
            .where(Rating.tmdb_movie_id == tmdb_movie_id)
            .order_by(Rating.created_at.desc(), Rating.id.asc())
        )
        result = await self.session.execute(query)
        return [RatingRow(*row) for row in result.all()]

    async def latest(self, limit: int) -> list[RatingRow]:
        """Most recent ratings across all movies."""
        query = (
            select(Rating, User.username)
            .join(User, User.id == Rating.user_id)
            .order_by(Rating.created_at.desc(), Rating.id.asc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [RatingRow(*row) for row in result.all()]

    async def top_rated(self, limit: int) -> list[MovieScore]:
        """Movies by average score; ties broken by rating count then movie id."""
        average = func.avg(Rating.score).label("average_rating")
        count = func.count(Rating.id).label("rating_count")
        query = (
            select(Rating.tmdb_movie_id, average, count)
            .group_by(Rating.tmdb_movie_id)
            .order_by(average.desc(), count.desc(), Rating.tmdb_movie_id.asc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [
            MovieScore(movie_id, round(float(avg), 2), int(total))
            for movie_id, avg, total in result.all()
        ]

    async def unrated_for_user(self, user_id: UUID, now: datetime, limit: int) -> list[UnratedMovie]:
        """Movies from the user's past sessions that they have not rated yet.

        One row per movie, carrying its most recent past session.
        """
        already_rated = (
            select(Rating.id)
            .where(
                Rating.user_id == user_id,
                Rating.tmdb_movie_id == Room.tmdb_movie_id,
            )
            .exists()
        )
        last_session = func.max(Room.session_datetime).label("session_datetime")
        query = (
            select(Room.tmdb_movie_id, last_session)
            .join(RoomMember, RoomMember.room_id == Room.id)
            .where(
                RoomMember.user_id == user_id,
                Room.session_datetime < now,
                ~already_rated,
            )
            .group_by(Room.tmdb_movie_id)
            .order_by(last_session.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [UnratedMovie(*row) for row in result.all()]


class FavoriteRepository(BaseRepository[Favorite]):
    """Favorites; uq_favorites_user_movie makes adds idempotent."""

    model = Favorite

    async def exists(self, user_id: UUID, tmdb_movie_id: int) -> bool:
        result = await self.session.execute(
            select(Favorite.id).where(
                Favorite.user_id == user_id,
                Favorite.tmdb_movie_id == tmdb_movie_id,
            )
        )
        return result.first() is not None

    async def add_if_absent(self, user_id: UUID, tmdb_movie_id: int) -> bool:
        """Insert the favorite unless present. Returns True if a row was created."""
        stmt = (
            self.upsert_statement()
            .values(
                id=uuid4(),
                user_id=user_id,
                tmdb_movie_id=tmdb_movie_id,
                created_at=utc_now(),
            )
            .on_conflict_do_nothing(index_elements=["user_id", "tmdb_movie_id"])
            .returning(Favorite.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def remove(self, user_id: UUID, tmdb_movie_id: int) -> None:
        await self.session.execute(
            delete(Favorite).where(
                Favorite.user_id == user_id,  # type: ignore[arg-type]
                Favorite.tmdb_movie_id == tmdb_movie_id,  # type: ignore[arg-type]
            )
        )
