"""Optional Redis connection shared by the movie cache and the rate limiter.

Nothing requires Redis. Without REDIS_URL, or when the server cannot be
reached at first use, get_redis() returns None and callers fall back to
uncached TMDB calls and per-process rate limiting.
"""

from redis.asyncio import ConnectionPool, Redis

from src.movieclub.core.config import get_settings
from src.movieclub.core.logging import get_logger

logger = get_logger(__name__)

_pool: ConnectionPool | None = None
_redis: Redis | None = None
_connection_attempted: bool = False


async def _connect(url: str, max_connections: int) -> tuple[ConnectionPool, Redis] | None:
    pool = ConnectionPool.from_url(url, max_connections=max_connections, decode_responses=True)
    client = Redis(connection_pool=pool)
    try:
        await client.ping()  # type: ignore[misc]
    except Exception as e:
        logger.warning("Redis unreachable, running without it", error=str(e))
        await client.aclose()
        await pool.disconnect()
        return None
    return pool, client


async def get_redis() -> Redis | None:
    """The shared client, connecting on first use.

    One connection attempt is made per process lifetime (or until
    close_redis); a failed attempt keeps returning None.
    """
    global _pool, _redis, _connection_attempted

    if _redis is not None or _connection_attempted:
        return _redis
    _connection_attempted = True

    settings = get_settings()
    if not settings.redis_url:
        logger.info("Redis not configured (REDIS_URL not set)")
        return None

    connected = await _connect(settings.redis_url, settings.redis_pool_size)
    if connected is not None:
        _pool, _redis = connected
        logger.info("Redis connected")
    return _redis


async def close_redis() -> None:
    """Release the pool. The next get_redis call reconnects."""
    if _redis is not None:
        await _redis.aclose()
        logger.info("Redis connection closed")
    if _pool is not None:
        await _pool.disconnect()
    reset_redis_state()


def reset_redis_state() -> None:
    """Forget the client without closing it (for testing)."""
    global _pool, _redis, _connection_attempted
    _pool = None
    _redis = None
    _connection_attempted = False
