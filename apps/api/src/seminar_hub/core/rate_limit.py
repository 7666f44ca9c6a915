"""
Rate Limiting

Sliding-window rate limiting backed by Redis sorted sets, with an
in-process fallback when Redis is unavailable.

Applied to:
- Login attempts (per email) against credential stuffing
- Report runs (per principal) since generators can be expensive
- Bulk user imports (per principal)
"""

import logging
import time
from uuid import uuid4

from fastapi import HTTPException, status
from redis.asyncio import Redis
from redis.exceptions import RedisError

from seminar_hub.core.redis import get_redis_client

logger = logging.getLogger(__name__)

# Fallback storage: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}

# (limit, window_seconds)
RATE_LIMIT_LOGIN = (10, 300)
RATE_LIMIT_REPORT_RUN = (20, 60)
RATE_LIMIT_BULK_IMPORT = (5, 3600)


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(
    client: Redis,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    now = time.time()

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, now - window_seconds)
    pipe.zcard(key)
    # Unique member so two hits in the same instant both count
    pipe.zadd(key, {f"{now}:{uuid4().hex[:8]}": now})
    pipe.expire(key, window_seconds)
    results = await pipe.execute()

    return results[1] < limit


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """
    In-process fallback. Not shared across workers.
    """
    now = time.time()
    window_start = now - window_seconds

    hits = [ts for ts in _memory_store.get(key, []) if ts > window_start]
    if len(hits) >= limit:
        _memory_store[key] = hits
        return False

    hits.append(now)
    _memory_store[key] = hits
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check whether a request is within limits.

    Args:
        key: Unique key (e.g. "login:jane@school.org")
        limit: Maximum requests in the window
        window_seconds: Window length in seconds

    Returns:
        True if the request is allowed
    """
    client = get_redis_client()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except RedisError as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


async def enforce_rate_limit(key: str, limit: int, window_seconds: int) -> None:
    """
    Raise RateLimitExceeded when the key is over its limit.

    Usage:
        await enforce_rate_limit(f"report_run:{session.principal_id}", *RATE_LIMIT_REPORT_RUN)
    """
    if not await check_rate_limit(key, limit, window_seconds):
        logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
        raise RateLimitExceeded(limit, window_seconds)


__all__ = [
    "RATE_LIMIT_LOGIN",
    "RATE_LIMIT_REPORT_RUN",
    "RATE_LIMIT_BULK_IMPORT",
    "RateLimitExceeded",
    "check_rate_limit",
    "enforce_rate_limit",
]
