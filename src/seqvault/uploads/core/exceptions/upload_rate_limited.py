"""Upload rate limited exception.

ONLY upload throttling - a caller started more uploads than the
per-user quota allows inside one window.

Following maximum separation architecture - one file = one purpose.
"""

from ....core.exceptions import RateLimitExceededError


class UploadRateLimited(RateLimitExceededError):
    """Raised when a user exceeds the upload quota."""

    error_code_default = "RATE_LIMITED"

    def __init__(self, user_id: str, limit: int, window_seconds: int, retry_after: int):
        self.retry_after = retry_after
        super().__init__(
            f"Upload limit exceeded. You can upload up to {limit} files per "
            f"{_describe_window(window_seconds)}.",
            details={
                "user_id": user_id,
                "limit": limit,
                "window_seconds": window_seconds,
                "retry_after": retry_after,
            },
        )


def _describe_window(window_seconds: int) -> str:
    if window_seconds == 3600:
        return "hour"
    if window_seconds % 3600 == 0:
        return f"{window_seconds // 3600} hours"
    if window_seconds % 60 == 0:
        return f"{window_seconds // 60} minutes"
    return f"{window_seconds} seconds"
