from fastapi import APIRouter

from src.movieclub.api.v1 import auth, favorites, movies, ratings, rooms, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(movies.router)
api_router.include_router(rooms.router)
api_router.include_router(ratings.router)
api_router.include_router(favorites.router)
