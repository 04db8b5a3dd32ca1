"""Rate limit value objects.

ONLY rate limit configuration and the state a limiter reports after
counting one request.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RateLimit:
    """At most ``limit`` requests per ``window_seconds`` for one identifier."""

    limit: int
    window_seconds: int

    def __post_init__(self):
        if self.limit < 1:
            raise ValueError("Rate limit must allow at least one request")
        if self.window_seconds < 1:
            raise ValueError("Rate limit window must be at least one second")


@dataclass(frozen=True)
class RateLimitState:
    """Usage in the current window, including the request just counted."""

    requests_made: int
    limit: int
    reset_time: datetime

    @property
    def is_exceeded(self) -> bool:
        return self.requests_made > self.limit

    @property
    def requests_remaining(self) -> int:
        return max(0, self.limit - self.requests_made)

    def retry_after_seconds(self, now: datetime) -> int:
        return max(1, int((self.reset_time - now).total_seconds() + 0.999))
