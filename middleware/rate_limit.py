"""
Rate Limiting

Protects the API from abuse using Redis-based counters.

Features:
- Per-user rate limiting for order creation
- Per-user rate limiting for partner applications
- Per-user (or per-e-mail for guests) rate limiting for quote requests
- Configurable limits via environment variables
- Automatic expiry using Redis TTL

Configuration:
- MAX_ORDERS_PER_USER_PER_HOUR: Maximum orders per user per hour
- MAX_PARTNER_APPLICATIONS_PER_HOUR: Maximum partner applications per user per hour
- MAX_QUOTE_REQUESTS_PER_HOUR: Maximum quote requests per user or guest e-mail per hour
"""

import logging

from redis.asyncio import Redis

from enums.rate_limit_operation import RateLimitOperation
from exceptions.base import RateLimitExceededException


class RateLimiter:
    """
    Redis-based fixed-window rate limiter for specific operations.

    Usage:
        limiter = RateLimiter(redis)
        await limiter.enforce(RateLimitOperation.ORDER_CREATE, user_id, max_count=5, window_seconds=3600)
    """

    def __init__(self, redis: Redis):
        self.redis = redis

    @staticmethod
    def _key(operation: RateLimitOperation, user_id: int | str) -> str:
        # Redis key: rate_limit:{operation}:{user_id}
        return f"rate_limit:{operation.value}:{user_id}"

    async def is_rate_limited(
        self,
        operation: RateLimitOperation,
        user_id: int | str,
        max_count: int,
        window_seconds: int
    ) -> tuple[bool, int, int]:
        """
        Count one more attempt and check it against the limit.

        Returns:
            Tuple of (is_limited, current_count, remaining_count)
            - is_limited: True if user has exceeded the limit
            - current_count: Attempts in the current window, this one included
            - remaining_count: Attempts left (0 if limited)
        """
        key = self._key(operation, user_id)

        try:
            current_count = await self.redis.incr(key)

            # Window starts with the first attempt
            if current_count == 1:
                await self.redis.expire(key, window_seconds)

            is_limited = current_count > max_count
            remaining = max(0, max_count - current_count)

            if is_limited:
                ttl = await self.redis.ttl(key)
                logging.warning(
                    f"Rate limit exceeded: user={user_id}, operation={operation.value}, "
                    f"count={current_count}/{max_count}, resets_in={ttl}s"
                )

            return is_limited, current_count, remaining

        except Exception as e:
            # If Redis fails, don't block the operation (fail open)
            logging.error(f"Rate limiter error: {e}")
            return False, 0, max_count

    async def enforce(self, operation: RateLimitOperation, user_id: int | str, max_count: int,
                      window_seconds: int) -> None:
        """
        Raises:
            RateLimitExceededException: With the seconds left until the window resets
        """
        is_limited, _, _ = await self.is_rate_limited(operation, user_id, max_count, window_seconds)
        if is_limited:
            retry_after = await self.get_remaining_time(operation, user_id)
            raise RateLimitExceededException(operation.value, user_id, retry_after)

    async def reset_limit(self, operation: RateLimitOperation, user_id: int | str):
        await self.redis.delete(self._key(operation, user_id))
        logging.info(f"Rate limit reset: user={user_id}, operation={operation.value}")

    async def get_remaining_time(self, operation: RateLimitOperation, user_id: int | str) -> int:
        """Seconds until the window resets (0 when no window is open)."""
        try:
            ttl = await self.redis.ttl(self._key(operation, user_id))
        except Exception as e:
            logging.error(f"Rate limiter error: {e}")
            return 0
        return ttl if ttl > 0 else 0
