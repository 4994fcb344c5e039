"""Ratings and favorites, both keyed by (user, TMDB movie)."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.movieclub.models.base import utc_now

MIN_SCORE = 0
MAX_SCORE = 10


class Rating(SQLModel, table=True):
    """A user's score for a movie. At most one per (user, movie)."""

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "tmdb_movie_id", name="uq_ratings_user_movie"),
        CheckConstraint(
            f"score >= {MIN_SCORE} AND score <= {MAX_SCORE}",
            name="ck_ratings_score_range",
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    tmdb_movie_id: int = Field(index=True)
    score: int
    comment: str | None = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, index=True)


class Favorite(SQLModel, table=True):
    """A movie a user marked as favorite."""

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "tmdb_movie_id", name="uq_favorites_user_movie"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    tmdb_movie_id: int
    created_at: datetime = Field(default_factory=utc_now)
