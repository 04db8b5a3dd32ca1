"""In-memory fixed window rate limiter for a single process."""

import asyncio
from datetime import datetime, timedelta
from typing import Callable, Dict, Tuple

from ....utils.datetime import utc_now
from ...core.value_objects import RateLimit, RateLimitState


class MemoryRateLimiter:
    """Counts requests per identifier in a dict of ``(window_start, count)``."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._windows: Dict[str, Tuple[datetime, int]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def increment_usage(self, identifier: str, rate_limit: RateLimit) -> RateLimitState:
        now = self._clock()
        window = timedelta(seconds=rate_limit.window_seconds)
        async with self._lock:
            self._purge(now, window)
            start, count = self._windows.get(identifier, (now, 0))
            count += 1
            self._windows[identifier] = (start, count)
        return RateLimitState(requests_made=count, limit=rate_limit.limit, reset_time=start + window)

    async def reset_limit(self, identifier: str) -> bool:
        async with self._lock:
            return self._windows.pop(identifier, None) is not None

    def _purge(self, now: datetime, window: timedelta) -> None:
        expired = [key for key, (start, _) in self._windows.items() if now >= start + window]
        for key in expired:
            del self._windows[key]
