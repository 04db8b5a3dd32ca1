"""FastAPI dependencies for the upload router."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from ..application.services import UploadRatePolicy
from ..application.services.upload_coordinator import UploadCoordinator


def get_upload_coordinator(request: Request) -> UploadCoordinator:
    """Coordinator installed on ``app.state`` by ``create_app``."""
    coordinator = getattr(request.app.state, "upload_coordinator", None)
    if coordinator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Upload service is not initialized",
        )
    return coordinator


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Caller identity, as asserted by the authenticating gateway.

    Applications with their own authentication override this dependency.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return x_user_id.strip()


def get_upload_rate_policy(request: Request) -> Optional[UploadRatePolicy]:
    """Rate policy on ``app.state``; None when the quota is disabled."""
    return getattr(request.app.state, "upload_rate_policy", None)


async def enforce_upload_rate_limit(
    user_id: str = Depends(get_current_user_id),
    policy: Optional[UploadRatePolicy] = Depends(get_upload_rate_policy),
) -> None:
    """Counts one upload against the caller's quota, raising UploadRateLimited when over it."""
    if policy is not None:
        await policy.enforce(user_id)
