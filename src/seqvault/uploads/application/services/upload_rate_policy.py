"""Upload rate policy.

ONLY upload throttling - each user may start a bounded number of uploads
per window, counted when an upload is initiated or sent in one request.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from datetime import datetime
from typing import Callable

from ....utils.datetime import utc_now
from ...core.exceptions import UploadRateLimited
from ...core.protocols import UploadRateLimiter
from ...core.value_objects import RateLimit, RateLimitState

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_RATE_LIMIT = RateLimit(limit=10, window_seconds=3600)


class UploadRatePolicy:
    """Enforces a per-user RateLimit through an UploadRateLimiter."""

    def __init__(
        self,
        limiter: UploadRateLimiter,
        rate_limit: RateLimit = DEFAULT_UPLOAD_RATE_LIMIT,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._limiter = limiter
        self.rate_limit = rate_limit
        self._clock = clock

    @staticmethod
    def identifier_for(user_id: str) -> str:
        return f"upload:user:{user_id}"

    async def enforce(self, user_id: str) -> RateLimitState:
        """Count one upload for ``user_id``.

        Raises:
            UploadRateLimited: If the user is over quota for the current window
        """
        state = await self._limiter.increment_usage(self.identifier_for(user_id), self.rate_limit)
        if state.is_exceeded:
            retry_after = state.retry_after_seconds(self._clock())
            logger.warning(
                f"User {user_id} exceeded upload limit "
                f"({self.rate_limit.limit}/{self.rate_limit.window_seconds}s), retry in {retry_after}s"
            )
            raise UploadRateLimited(
                user_id, self.rate_limit.limit, self.rate_limit.window_seconds, retry_after
            )
        return state

    async def reset(self, user_id: str) -> bool:
        return await self._limiter.reset_limit(self.identifier_for(user_id))
