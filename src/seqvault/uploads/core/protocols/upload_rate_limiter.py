"""Upload rate limiter protocol.

ONLY request counting contract - records one request for an identifier
and reports the window it landed in. Deciding what to do about an
exceeded window is left to the caller.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Protocol, runtime_checkable

from ..value_objects import RateLimit, RateLimitState


@runtime_checkable
class UploadRateLimiter(Protocol):
    """Fixed window request counter."""

    async def increment_usage(self, identifier: str, rate_limit: RateLimit) -> RateLimitState:
        """Count one request for ``identifier`` and return the updated state."""
        ...

    async def reset_limit(self, identifier: str) -> bool:
        """Forget every request counted for ``identifier``."""
        ...
