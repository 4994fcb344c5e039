from pydantic import BaseModel


class FavoriteStatus(BaseModel):
    tmdb_movie_id: int
    is_favorite: bool
