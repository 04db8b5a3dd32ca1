"""Redis fixed window rate limiter.

One counter per identifier at ``<prefix><identifier>``. The first request
of a window sets the key's expiry to the window length, so the counter
resets itself and every API worker sees the same count.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

import redis.asyncio as redis
from redis.exceptions import RedisError

from ....core.exceptions import ServiceUnavailableError
from ....utils.datetime import utc_now
from ...core.value_objects import RateLimit, RateLimitState

logger = logging.getLogger(__name__)

# KEYS: counter   ARGV: window in milliseconds
_INCREMENT_SCRIPT = """
local count = redis.call('INCR', KEYS[1])
local ttl = redis.call('PTTL', KEYS[1])
if count == 1 or ttl < 0 then
  redis.call('PEXPIRE', KEYS[1], ARGV[1])
  ttl = tonumber(ARGV[1])
end
return {count, ttl}
"""


class RedisRateLimiter:
    """Rate limiter shared across processes through Redis."""

    def __init__(
        self,
        redis_client: redis.Redis,
        key_prefix: str = "seqvault:ratelimit:",
        clock: Callable[[], datetime] = utc_now,
    ):
        self._redis = redis_client
        self._prefix = key_prefix
        self._clock = clock

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "seqvault:ratelimit:") -> 'RedisRateLimiter':
        return cls(redis.from_url(url, decode_responses=True), key_prefix)

    async def close(self) -> None:
        await self._redis.aclose()

    def _key(self, identifier: str) -> str:
        return f"{self._prefix}{identifier}"

    async def increment_usage(self, identifier: str, rate_limit: RateLimit) -> RateLimitState:
        try:
            count, ttl_ms = await self._redis.eval(
                _INCREMENT_SCRIPT, 1, self._key(identifier), rate_limit.window_seconds * 1000
            )
        except RedisError as e:
            raise ServiceUnavailableError(f"Failed to count request for rate limiting: {e}") from e
        return RateLimitState(
            requests_made=int(count),
            limit=rate_limit.limit,
            reset_time=self._clock() + timedelta(milliseconds=int(ttl_ms)),
        )

    async def reset_limit(self, identifier: str) -> bool:
        try:
            return await self._redis.delete(self._key(identifier)) > 0
        except RedisError as e:
            logger.warning(f"Failed to reset rate limit for {identifier}: {e}")
            return False
