"""Shared Redis client for the redis sequence backend.

Redis is optional. Only SEQUENCE_BACKEND=redis needs it; with the default
mongo backend a missing REDIS_URL is reported as "not_configured" on /health.
A failed connect is not retried until close_redis() runs.
"""

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.catalog.core.config import get_settings
from src.catalog.core.logging import get_logger

logger = get_logger(__name__)

NOT_CONFIGURED = "not_configured"
UNAVAILABLE = "unavailable"
HEALTHY = "healthy"

_client: Redis | None = None
_attempted: bool = False


async def get_redis() -> Redis | None:
    """Return the shared client, connecting on first use. None when unavailable."""
    global _client, _attempted

    if _client is not None or _attempted:
        return _client
    _attempted = True

    settings = get_settings()
    if not settings.redis_url:
        logger.info("Redis not configured", sequence_backend=settings.sequence_backend)
        return None

    # from_url owns its pool, so aclose() releases the connections too
    client = Redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_pool_size,
        socket_timeout=settings.redis_socket_timeout_seconds,
        socket_connect_timeout=settings.redis_socket_timeout_seconds,
        decode_responses=True,
    )
    try:
        await client.ping()  # type: ignore[misc]
    except (RedisError, OSError) as e:
        logger.warning("Redis connection failed", error=str(e))
        await client.aclose()
        return None

    logger.info("Redis connected", max_connections=settings.redis_pool_size)
    _client = client
    return _client


async def check_redis() -> str:
    """Health of the shared client: healthy, not_configured, unavailable or unhealthy: <reason>."""
    client = await get_redis()
    if client is None:
        return UNAVAILABLE if get_settings().redis_url else NOT_CONFIGURED
    try:
        await client.ping()  # type: ignore[misc]
    except (RedisError, OSError) as e:
        return f"unhealthy: {e}"
    return HEALTHY


async def close_redis() -> None:
    """Close the shared client and allow the next get_redis() to reconnect."""
    global _client, _attempted

    if _client is not None:
        await _client.aclose()
        logger.info("Redis connection closed")
    _client = None
    _attempted = False
