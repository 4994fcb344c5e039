from src.movieclub.services.admin_service import AdminService
from src.movieclub.services.auth_service import AuthService
from src.movieclub.services.favorite_service import FavoriteService
from src.movieclub.services.movie_service import MovieService
from src.movieclub.services.rating_service import RatingService
from src.movieclub.services.registration_service import RegistrationService
from src.movieclub.services.room_service import RoomService
from src.movieclub.services.user_service import UserService

__all__ = [
    "AdminService",
    "AuthService",
    "FavoriteService",
    "MovieService",
    "RatingService",
    "RegistrationService",
    "RoomService",
    "UserService",
]
