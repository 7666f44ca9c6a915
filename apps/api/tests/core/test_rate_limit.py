"""
Tests for the sliding-window rate limiter.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from seminar_hub.core import rate_limit
from seminar_hub.core.rate_limit import RateLimitExceeded, enforce_rate_limit


@pytest.fixture
def no_redis():
    with (
        patch.object(rate_limit, "get_redis_client", return_value=None),
        patch.dict(rate_limit._memory_store, clear=True),
    ):
        yield


@pytest.mark.asyncio
async def test_memory_fallback_blocks_after_limit(no_redis):
    for _ in range(3):
        await enforce_rate_limit("login:someone@example.edu", 3, 60)

    with pytest.raises(RateLimitExceeded) as exc_info:
        await enforce_rate_limit("login:someone@example.edu", 3, 60)

    assert exc_info.value.status_code == 429
    assert exc_info.value.headers["Retry-After"] == "60"


@pytest.mark.asyncio
async def test_keys_are_counted_separately(no_redis):
    await enforce_rate_limit("report_run:a", 1, 60)
    await enforce_rate_limit("report_run:b", 1, 60)

    with pytest.raises(RateLimitExceeded):
        await enforce_rate_limit("report_run:a", 1, 60)


@pytest.mark.asyncio
async def test_redis_count_decides():
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[0, 5, 1, True])
    client = MagicMock()
    client.pipeline.return_value = pipe

    with patch.object(rate_limit, "get_redis_client", return_value=client):
        assert await rate_limit.check_rate_limit("user_import:a", 5, 3600) is False
        pipe.execute.return_value = [0, 4, 1, True]
        assert await rate_limit.check_rate_limit("user_import:a", 5, 3600) is True


@pytest.mark.asyncio
async def test_redis_failure_falls_back_to_memory():
    pipe = MagicMock()
    pipe.execute = AsyncMock(side_effect=RedisConnectionError("down"))
    client = MagicMock()
    client.pipeline.return_value = pipe

    with (
        patch.object(rate_limit, "get_redis_client", return_value=client),
        patch.dict(rate_limit._memory_store, clear=True),
    ):
        assert await rate_limit.check_rate_limit("login:x@example.edu", 1, 60) is True
        assert await rate_limit.check_rate_limit("login:x@example.edu", 1, 60) is False
