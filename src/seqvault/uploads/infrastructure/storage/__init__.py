"""Staging and durable storage adapters."""

from .local_chunk_staging import LocalChunkStaging
from .local_storage_provider import LocalStorageProvider

__all__ = ["LocalChunkStaging", "LocalStorageProvider"]
