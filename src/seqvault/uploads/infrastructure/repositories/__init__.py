"""Repository and store adapters."""

from .memory_session_store import MemoryUploadSessionStore
from .redis_session_store import RedisUploadSessionStore
from .memory_stored_file_repository import MemoryStoredFileRepository
from .asyncpg_stored_file_repository import AsyncpgStoredFileRepository
from .product_ownership import StaticProductOwnershipChecker, AsyncpgProductOwnershipChecker

__all__ = [
    "MemoryUploadSessionStore",
    "RedisUploadSessionStore",
    "MemoryStoredFileRepository",
    "AsyncpgStoredFileRepository",
    "StaticProductOwnershipChecker",
    "AsyncpgProductOwnershipChecker",
]
