"""Rate limiting with optional Redis backend.

Two layers:
1. A global per-IP token bucket applied to every request (flood protection).
2. slowapi decorators on credential endpoints (login/register brute force).

Both are disabled when APP_ENV=testing.
"""

import asyncio
import time
from dataclasses import dataclass, field

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.movieclub.core.config import get_settings
from src.movieclub.core.logging import get_logger
from src.movieclub.core.redis import get_redis

logger = get_logger(__name__)

EXEMPT_PATHS = frozenset({"/health", "/metrics", "/docs", "/openapi.json", "/redoc"})

# Atomic refill-and-take on the Redis server
_REDIS_TOKEN_BUCKET_SCRIPT = """
local key = KEYS[1]
local rate = tonumber(ARGV[1])
local burst = tonumber(ARGV[2])
local now = tonumber(ARGV[3])
local ttl = tonumber(ARGV[4])

local bucket = redis.call('HMGET', key, 'tokens', 'last_update')
local tokens = tonumber(bucket[1]) or burst
local last_update = tonumber(bucket[2]) or now

tokens = math.min(burst, tokens + (now - last_update) * rate)

local allowed = 0
if tokens >= 1 then
    tokens = tokens - 1
    allowed = 1
end

redis.call('HSET', key, 'tokens', tokens, 'last_update', now)
redis.call('EXPIRE', key, ttl)
return allowed
"""

_script_sha: str | None = None


@dataclass
class TokenBucket:
    """In-process token bucket for one client."""

    tokens: float
    last_update: float = field(default_factory=time.time)

    def take(self, rate: float, burst: float, now: float) -> bool:
        self.tokens = min(burst, self.tokens + (now - self.last_update) * rate)
        self.last_update = now
        if self.tokens >= 1:
            self.tokens -= 1
            return True
        return False


_rate_limit_buckets: dict[str, TokenBucket] = {}
_rate_limit_lock = asyncio.Lock()


def get_rate_limit_key(request: Request) -> str:
    """Rate limit key: client IP only.

    Never derive the key from request headers the client controls; rotating
    them would mint fresh buckets.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the slowapi limiter for per-endpoint limits."""
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    # slowapi talks to Redis synchronously through the limits library
    if settings.redis_url:
        logger.info("Rate limiter using Redis backend")
        return Limiter(key_func=get_rate_limit_key, storage_uri=settings.redis_url)

    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key)


limiter = create_limiter()


async def _take_in_memory(client_ip: str) -> bool:
    settings = get_settings()
    rate = float(settings.global_rate_limit_per_second)
    burst = float(settings.global_rate_limit_burst)
    now = time.time()

    async with _rate_limit_lock:
        bucket = _rate_limit_buckets.get(client_ip)
        if bucket is None:
            bucket = _rate_limit_buckets[client_ip] = TokenBucket(tokens=burst, last_update=now)
        return bucket.take(rate, burst, now)


async def _take_redis(redis: object, client_ip: str) -> bool:
    global _script_sha
    settings = get_settings()
    rate = settings.global_rate_limit_per_second
    burst = settings.global_rate_limit_burst
    # Long enough to refill a drained bucket
    ttl = int(burst / rate) + 60

    if _script_sha is None:
        _script_sha = await redis.script_load(_REDIS_TOKEN_BUCKET_SCRIPT)  # type: ignore[attr-defined]

    result = await redis.evalsha(  # type: ignore[attr-defined]
        _script_sha,
        1,
        f"global_ratelimit:{client_ip}",
        str(rate),
        str(burst),
        str(time.time()),
        str(ttl),
    )
    return bool(result == 1)


async def check_global_rate_limit(client_ip: str) -> bool:
    """Take one token for client_ip. Redis first, in-memory on any Redis failure."""
    if get_settings().app_env == "testing":
        return True

    redis = await get_redis()
    if redis:
        try:
            return await _take_redis(redis, client_ip)
        except Exception as e:
            global _script_sha
            _script_sha = None  # Redis may have restarted and dropped the script
            logger.warning(
                "Redis rate limit check failed, falling back to in-memory",
                error=str(e),
                client_ip=client_ip,
            )

    return await _take_in_memory(client_ip)


async def global_rate_limit_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Reject clients that exceed the global request rate with 429."""
    if request.url.path in EXEMPT_PATHS:
        return await call_next(request)

    client_ip = get_rate_limit_key(request)
    if not await check_global_rate_limit(client_ip):
        logger.warning("Global rate limit exceeded", client_ip=client_ip, path=request.url.path)
        return JSONResponse(
            status_code=429,
            content={"detail": "Too many requests. Please slow down.", "retry_after": 1},
            headers={"Retry-After": "1"},
        )

    return await call_next(request)


def reset_rate_limit_state() -> None:
    """Forget all buckets and the cached script SHA. For testing."""
    global _script_sha
    _rate_limit_buckets.clear()
    _script_sha = None
