"""Shared Redis client for rate-limit counters."""

import logging

from redis.asyncio import Redis

from vetify.config import get_settings

logger = logging.getLogger(__name__)

_redis: Redis | None = None


def get_redis() -> Redis:
    """Create or return the cached Redis client.

    Timeouts are short and retries are off: a slow store must surface as a
    fast failure rather than stall the request path.
    """
    global _redis
    if _redis is None:
        settings = get_settings()
        _redis = Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=settings.redis_socket_timeout_seconds,
            socket_connect_timeout=settings.redis_socket_timeout_seconds,
            retry_on_timeout=False,
        )
        logger.info("Redis client initialized for rate limiting")
    return _redis


async def close_redis() -> None:
    """Close the Redis client. Called on app shutdown."""
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None
