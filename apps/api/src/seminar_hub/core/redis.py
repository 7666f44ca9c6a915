"""
Redis Configuration

Shared async Redis client. Redis is optional: the rate limiter falls
back to process memory and /ready reports it as degraded when absent.
"""

import logging

from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from seminar_hub.core.config import settings

logger = logging.getLogger(__name__)

redis_client: Redis | None = None


async def init_redis() -> Redis:
    """
    Connect to Redis on application startup.

    Raises:
        RedisError: If the server cannot be reached
    """
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    redis_client = client
    return redis_client


def get_redis_client() -> Redis | None:
    """Return the shared client, or None if Redis was never connected."""
    return redis_client


async def ping_redis() -> bool:
    """Readiness probe for Redis."""
    if redis_client is None:
        return False
    try:
        return bool(await redis_client.ping())
    except RedisError as e:
        logger.warning(f"Redis ping failed: {e}")
        return False


async def close_redis() -> None:
    """Close the shared client."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
