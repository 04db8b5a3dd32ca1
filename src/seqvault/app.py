"""
FastAPI application factory.

Backends are chosen from settings: Redis for sessions when ``redis_url`` is
set, PostgreSQL for stored files when ``database_url`` is set, in-memory
otherwise.
"""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, Awaitable, Callable, List, Optional

import asyncpg
from fastapi import FastAPI

from .__version__ import __version__
from .api import register_exception_handlers
from .config import LoggingConfig, UploadSettings, get_settings
from .uploads.api import router as uploads_router
from .uploads.application.services import CleanupServiceConfig, ExpirySweeper, UploadRatePolicy
from .uploads.application.services.upload_coordinator import (
    UploadCoordinator,
    create_upload_coordinator,
)
from .uploads.infrastructure.audit import LoggingAuditSink
from .uploads.infrastructure.rate_limiting import MemoryRateLimiter, RedisRateLimiter
from .uploads.infrastructure.repositories import (
    AsyncpgProductOwnershipChecker,
    AsyncpgStoredFileRepository,
    MemoryStoredFileRepository,
    MemoryUploadSessionStore,
    RedisUploadSessionStore,
)
from .uploads.infrastructure.storage import LocalChunkStaging, LocalStorageProvider
from .uploads.core.value_objects import RateLimit

logger = logging.getLogger(__name__)

Closer = Callable[[], Awaitable[Any]]


async def build_upload_coordinator(
    settings: UploadSettings,
    closers: List[Closer],
) -> UploadCoordinator:
    """Build the coordinator and its backends; cleanup callbacks go to ``closers``."""
    if settings.redis_url:
        store = RedisUploadSessionStore.from_url(settings.redis_url, settings.redis_key_prefix)
        closers.append(store.close)
        logger.info("Using Redis upload session store")
    else:
        store = MemoryUploadSessionStore()
        logger.warning("No redis_url configured; upload sessions are kept in memory")

    ownership_checker = None
    if settings.database_url:
        pool = await asyncpg.create_pool(
            settings.database_url,
            min_size=1,
            max_size=settings.db_pool_size,
        )
        closers.append(pool.close)
        repository = AsyncpgStoredFileRepository(pool, settings.database_schema)
        await repository.ensure_schema()
        ownership_checker = AsyncpgProductOwnershipChecker(pool, settings.database_schema)
        logger.info(f"Using PostgreSQL stored file repository (schema {settings.database_schema})")
    else:
        repository = MemoryStoredFileRepository()
        logger.warning("No database_url configured; stored file records are kept in memory")

    return create_upload_coordinator(
        store=store,
        staging=LocalChunkStaging(settings.staging_dir),
        storage=LocalStorageProvider(settings.storage_dir),
        repository=repository,
        audit_sink=LoggingAuditSink(),
        ownership_checker=ownership_checker,
        chunk_size=settings.chunk_size,
        session_ttl=timedelta(seconds=settings.session_ttl_seconds),
        header_probe_bytes=settings.header_probe_bytes,
        cleanup_config=CleanupServiceConfig(
            sweep_interval_seconds=settings.sweep_interval_seconds,
            orphan_staging_grace_seconds=settings.orphan_staging_grace_seconds,
        ),
    )


def build_upload_rate_policy(
    settings: UploadSettings,
    closers: List[Closer],
) -> Optional[UploadRatePolicy]:
    """Per-user upload quota, or None when ``upload_rate_limit`` is 0."""
    if settings.upload_rate_limit == 0:
        logger.warning("Upload rate limiting is disabled")
        return None

    rate_limit = RateLimit(settings.upload_rate_limit, settings.upload_rate_window_seconds)
    if settings.redis_url:
        limiter = RedisRateLimiter.from_url(settings.redis_url, settings.rate_limit_key_prefix)
        closers.append(limiter.close)
    else:
        limiter = MemoryRateLimiter()
    logger.info(
        f"Upload quota: {rate_limit.limit} per {rate_limit.window_seconds}s "
        f"({type(limiter).__name__})"
    )
    return UploadRatePolicy(limiter, rate_limit)


def create_app(
    settings: Optional[UploadSettings] = None,
    coordinator: Optional[UploadCoordinator] = None,
    rate_policy: Optional[UploadRatePolicy] = None,
) -> FastAPI:
    """Create the upload service application.

    A prebuilt ``coordinator`` is installed as-is and no backends are opened.
    """
    settings = settings or get_settings()
    rate_closers: List[Closer] = []
    if rate_policy is None:
        rate_policy = build_upload_rate_policy(settings, rate_closers)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        LoggingConfig.configure(settings.log_level, settings.log_format)
        closers: List[Closer] = list(rate_closers)
        if app.state.upload_coordinator is None:
            app.state.upload_coordinator = await build_upload_coordinator(settings, closers)

        sweeper = ExpirySweeper(app.state.upload_coordinator.cleanup)
        sweeper.start()
        logger.info(f"{settings.app_name} {__version__} started ({settings.environment})")
        try:
            yield
        finally:
            await sweeper.stop()
            for close in reversed(closers):
                try:
                    await close()
                except Exception as e:
                    logger.error(f"Error during shutdown: {e}")
            logger.info(f"{settings.app_name} stopped")

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.upload_coordinator = coordinator
    app.state.upload_rate_policy = rate_policy

    register_exception_handlers(app, is_production=settings.is_production)
    app.include_router(uploads_router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "healthy", "version": __version__}

    return app
