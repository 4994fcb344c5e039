"""Movie metadata cache with Redis backend and graceful fallback.

Only upstream TMDB payloads are cached here; local entities never are.
When Redis is unavailable every lookup is a miss and writes are skipped.
"""

import json
from hashlib import sha256
from typing import Any

from src.movieclub.core.logging import get_logger
from src.movieclub.core.redis import get_redis

logger = get_logger(__name__)

PREFIX_MOVIE_DETAILS = "tmdb:movie"
PREFIX_MOVIE_SEARCH = "tmdb:search"


def movie_details_key(movie_id: int, language: str) -> str:
    """Cache key for a movie details payload."""
    return f"{PREFIX_MOVIE_DETAILS}:{language}:{movie_id}"


def movie_search_key(query: str, page: int, language: str) -> str:
    """Cache key for a search page. Queries are normalized and hashed."""
    normalized = " ".join(query.lower().split())
    digest = sha256(normalized.encode()).hexdigest()
    return f"{PREFIX_MOVIE_SEARCH}:{language}:{page}:{digest}"


async def get_cached_json(key: str) -> Any | None:
    """Return the cached JSON value for key.

    Returns:
        The decoded value, or None on a miss, when Redis is unavailable,
        or when the stored value cannot be read.
    """
    redis = await get_redis()
    if not redis:
        return None

    try:
        raw = await redis.get(key)
    except Exception as e:
        logger.warning("Cache read failed", key=key, error=str(e))
        return None

    if raw is None:
        return None

    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Discarding unreadable cache entry", key=key)
        return None


async def set_cached_json(key: str, value: Any, ttl: int) -> bool:
    """Store value under key for ttl seconds.

    Returns:
        True if stored in Redis, False if Redis is unavailable or the write failed.
    """
    redis = await get_redis()
    if not redis:
        return False

    try:
        await redis.setex(key, ttl, json.dumps(value))
    except Exception as e:
        logger.warning("Cache write failed", key=key, error=str(e))
        return False
    return True
