"""Cleanup service.

ONLY cleanup operations - expired session sweeps and orphaned staging
reclamation, plus the background loop that runs them.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ....utils.datetime import utc_now
from ...core.protocols import ChunkStagingArea, UploadSessionStore

logger = logging.getLogger(__name__)


@dataclass
class CleanupServiceConfig:
    """Configuration for cleanup service."""

    sweep_interval_seconds: int = 300
    orphan_staging_grace_seconds: int = 3600


@dataclass
class CleanupReport:
    """What one maintenance pass reclaimed."""

    expired_sessions: int = 0
    orphaned_staging: int = 0


class CleanupService:
    """Upload maintenance service.

    Expiry is already enforced lazily on every access; sweeping only
    reclaims storage sooner.
    """

    def __init__(
        self,
        store: UploadSessionStore,
        staging: ChunkStagingArea,
        config: Optional[CleanupServiceConfig] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._staging = staging
        self._config = config or CleanupServiceConfig()
        self._clock = clock

    @property
    def config(self) -> CleanupServiceConfig:
        return self._config

    async def sweep_expired_sessions(self) -> int:
        """Remove expired sessions and their staged chunks."""
        expired = await self._store.sweep_expired(self._clock())
        for session in expired:
            try:
                await self._staging.discard(session.upload_id)
            except OSError as e:
                logger.error(f"Failed to discard staged data for expired upload {session.upload_id}: {e}")
        if expired:
            logger.info(f"Expired {len(expired)} upload sessions")
        return len(expired)

    async def sweep_orphaned_staging(self) -> int:
        """Remove staged data no live session owns, once it is old enough."""
        live = set(await self._store.list_upload_ids())
        grace = timedelta(seconds=self._config.orphan_staging_grace_seconds)
        now = self._clock()
        removed = 0

        for upload_id in await self._staging.list_upload_ids():
            if upload_id in live:
                continue
            modified = await self._staging.last_modified(upload_id)
            if modified is not None and now - modified < grace:
                continue
            try:
                await self._staging.discard(upload_id)
                removed += 1
            except OSError as e:
                logger.error(f"Failed to remove orphaned staging for {upload_id}: {e}")

        if removed:
            logger.info(f"Removed {removed} orphaned staging directories")
        return removed

    async def run_maintenance(self) -> CleanupReport:
        """Run all cleanup operations."""
        return CleanupReport(
            expired_sessions=await self.sweep_expired_sessions(),
            orphaned_staging=await self.sweep_orphaned_staging(),
        )


class ExpirySweeper:
    """Runs CleanupService.run_maintenance on an interval in the background."""

    def __init__(self, cleanup: CleanupService, interval_seconds: Optional[float] = None):
        self._cleanup = cleanup
        self._interval = interval_seconds if interval_seconds is not None else cleanup.config.sweep_interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running or self._interval <= 0:
            return
        self._task = asyncio.create_task(self._run(), name="seqvault-expiry-sweeper")
        logger.info(f"Upload expiry sweeper started (every {self._interval}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Upload expiry sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self._cleanup.run_maintenance()
            except Exception:
                # The loop must outlive a failed pass
                logger.exception("Upload maintenance pass failed")


def create_cleanup_service(
    store: UploadSessionStore,
    staging: ChunkStagingArea,
    config: Optional[CleanupServiceConfig] = None,
    clock: Callable[[], datetime] = utc_now,
) -> CleanupService:
    """Create cleanup service."""
    return CleanupService(store, staging, config, clock)
