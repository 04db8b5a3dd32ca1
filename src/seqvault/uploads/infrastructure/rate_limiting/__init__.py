"""Upload rate limiter adapters."""

from .memory_rate_limiter import MemoryRateLimiter
from .redis_rate_limiter import RedisRateLimiter

__all__ = [
    "MemoryRateLimiter",
    "RedisRateLimiter",
]
