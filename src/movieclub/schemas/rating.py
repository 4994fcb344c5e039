from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.movieclub.models.rating import MAX_SCORE, MIN_SCORE


class RatingCreate(BaseModel):
    score: int = Field(ge=MIN_SCORE, le=MAX_SCORE, strict=True)
    comment: str | None = Field(default=None, max_length=2000)

    @field_validator("comment")
    @classmethod
    def blank_comment_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class RatingRead(BaseModel):
    id: UUID
    user_id: UUID
    username: str
    tmdb_movie_id: int
    score: int
    comment: str | None
    created_at: datetime


class TopRatedMovie(BaseModel):
    tmdb_movie_id: int
    average_rating: float
    rating_count: int


class UnratedMovieRead(BaseModel):
    tmdb_movie_id: int
    session_datetime: datetime
