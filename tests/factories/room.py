"""Room, membership, rating and favorite factories."""

from datetime import timedelta
from uuid import uuid4

from polyfactory import Use

from src.movieclub.models import Favorite, Rating, Room, RoomMember, RoomMemberRole
from tests.factories.base import BaseFactory, utc_now


class RoomFactory(BaseFactory):
    """Rooms default to a session one week from now."""

    __model__ = Room

    id = Use(uuid4)
    owner_id = None
    tmdb_movie_id = 550
    session_datetime = Use(lambda: utc_now() + timedelta(days=7))
    is_private = False
    created_at = Use(utc_now)

    @classmethod
    def past(cls, days_ago: int = 1, **kwargs):
        """Create a room whose session already happened."""
        return cls.build(session_datetime=utc_now() - timedelta(days=days_ago), **kwargs)


class RoomMemberFactory(BaseFactory):
    __model__ = RoomMember

    # FK fields - must be set explicitly
    user_id = None
    room_id = None
    role = RoomMemberRole.MEMBER.value
    joined_at = Use(utc_now)

    @classmethod
    def owner(cls, **kwargs):
        return cls.build(role=RoomMemberRole.OWNER.value, **kwargs)


class RatingFactory(BaseFactory):
    __model__ = Rating

    id = Use(uuid4)
    user_id = None
    tmdb_movie_id = 550
    score = 7
    comment = None
    created_at = Use(utc_now)


class FavoriteFactory(BaseFactory):
    __model__ = Favorite

    id = Use(uuid4)
    user_id = None
    tmdb_movie_id = 550
    created_at = Use(utc_now)
