"""
Unit tests for the Redis-backed RateLimiter.
"""

from unittest.mock import AsyncMock

import pytest

from enums.rate_limit_operation import RateLimitOperation
from exceptions.base import RateLimitExceededException
from middleware.rate_limit import RateLimiter


class TestRateLimiter:

    @pytest.mark.asyncio
    async def test_counts_attempts_within_window(self, redis_client):
        limiter = RateLimiter(redis_client)

        first = await limiter.is_rate_limited(RateLimitOperation.ORDER_CREATE, 1, max_count=2, window_seconds=3600)
        second = await limiter.is_rate_limited(RateLimitOperation.ORDER_CREATE, 1, max_count=2, window_seconds=3600)
        third = await limiter.is_rate_limited(RateLimitOperation.ORDER_CREATE, 1, max_count=2, window_seconds=3600)

        assert first == (False, 1, 1)
        assert second == (False, 2, 0)
        assert third == (True, 3, 0)

    @pytest.mark.asyncio
    async def test_window_expiry_set_on_first_attempt(self, redis_client):
        limiter = RateLimiter(redis_client)

        await limiter.is_rate_limited(RateLimitOperation.PARTNER_APPLY, 7, max_count=3, window_seconds=600)

        ttl = await redis_client.ttl("rate_limit:partner_apply:7")
        assert 0 < ttl <= 600

    @pytest.mark.asyncio
    async def test_operations_and_users_counted_separately(self, redis_client):
        limiter = RateLimiter(redis_client)

        await limiter.is_rate_limited(RateLimitOperation.ORDER_CREATE, 1, max_count=1, window_seconds=60)
        other_op = await limiter.is_rate_limited(RateLimitOperation.PARTNER_APPLY, 1, max_count=1, window_seconds=60)
        other_user = await limiter.is_rate_limited(RateLimitOperation.ORDER_CREATE, 2, max_count=1, window_seconds=60)

        assert other_op[0] is False
        assert other_user[0] is False

    @pytest.mark.asyncio
    async def test_enforce_raises_with_retry_after(self, redis_client):
        limiter = RateLimiter(redis_client)
        await limiter.enforce(RateLimitOperation.ORDER_CREATE, 5, max_count=1, window_seconds=3600)

        with pytest.raises(RateLimitExceededException) as exc_info:
            await limiter.enforce(RateLimitOperation.ORDER_CREATE, 5, max_count=1, window_seconds=3600)

        assert exc_info.value.operation == "order_create"
        assert 0 < exc_info.value.retry_after_seconds <= 3600

    @pytest.mark.asyncio
    async def test_reset_limit(self, redis_client):
        limiter = RateLimiter(redis_client)
        await limiter.is_rate_limited(RateLimitOperation.ORDER_CREATE, 5, max_count=1, window_seconds=3600)
        await limiter.is_rate_limited(RateLimitOperation.ORDER_CREATE, 5, max_count=1, window_seconds=3600)

        await limiter.reset_limit(RateLimitOperation.ORDER_CREATE, 5)

        assert await limiter.get_remaining_time(RateLimitOperation.ORDER_CREATE, 5) == 0
        result = await limiter.is_rate_limited(RateLimitOperation.ORDER_CREATE, 5, max_count=1, window_seconds=3600)
        assert result == (False, 1, 0)

    @pytest.mark.asyncio
    async def test_fails_open_when_redis_is_down(self):
        broken = AsyncMock()
        broken.incr.side_effect = ConnectionError("redis unavailable")
        broken.ttl.side_effect = ConnectionError("redis unavailable")
        limiter = RateLimiter(broken)

        assert await limiter.is_rate_limited(RateLimitOperation.ORDER_CREATE, 1, 5, 3600) == (False, 0, 5)
        await limiter.enforce(RateLimitOperation.ORDER_CREATE, 1, 5, 3600)
        assert await limiter.get_remaining_time(RateLimitOperation.ORDER_CREATE, 1) == 0
