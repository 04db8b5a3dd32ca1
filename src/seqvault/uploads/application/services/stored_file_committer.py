"""Stored file committer.

ONLY the commit half of finalize - integrity validation, content-hash
deduplication, metadata enrichment and durable persistence of an
assembled file. Shared by chunked completion and single-request upload.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ....utils.hashing import sanitize_file_name
from ..validators import FileIntegrityValidator
from ...core.entities import StoredFile
from ...core.exceptions import (
    DuplicateContentHash,
    IntegrityCheckFailed,
    MetadataExtractionFailed,
)
from ...core.protocols import StorageProvider, StoredFileRepository
from ...core.value_objects import (
    ABSENT_METADATA,
    FileCategory,
    FileId,
    FormatMetadata,
    StorageKey,
)
from .audit_recorder import AuditRecorder
from .file_assembler import AssembledFile
from .metadata_extractor import MetadataExtractor

logger = logging.getLogger(__name__)


@dataclass
class CommitRequest:
    """Who uploaded what, as declared by the uploader."""

    owner_id: str
    file_name: str
    mime_type: str
    category: FileCategory
    declared_size: int
    upload_id: Optional[str] = None
    product_id: Optional[str] = None
    version_id: Optional[str] = None


@dataclass
class CommitResult:
    """The stored file the upload resolved to."""

    stored_file: StoredFile
    deduplicated: bool

    @property
    def metadata(self) -> FormatMetadata:
        return self.stored_file.metadata


class StoredFileCommitter:
    """Turns an assembled file into a durable, deduplicated StoredFile.

    Order matters: integrity first so bad bytes never reach storage, then
    dedup so identical bytes are written at most once.
    """

    def __init__(
        self,
        repository: StoredFileRepository,
        storage: StorageProvider,
        audit: AuditRecorder,
        integrity_validator: Optional[FileIntegrityValidator] = None,
        metadata_extractor: Optional[MetadataExtractor] = None,
    ):
        self._repository = repository
        self._storage = storage
        self._audit = audit
        self._integrity_validator = integrity_validator or FileIntegrityValidator()
        self._metadata_extractor = metadata_extractor or MetadataExtractor()

    async def commit(self, request: CommitRequest, assembled: AssembledFile) -> CommitResult:
        """Validate, dedupe, enrich and persist.

        Raises:
            IntegrityCheckFailed: If the content fails integrity validation
            StorageWriteFailed: If durable storage rejects the write
        """
        await self._verify_integrity(request, assembled)

        existing = await self._repository.get_by_hash(assembled.content_hash)
        if existing is not None:
            logger.info(
                f"Upload {request.upload_id} deduplicated against stored file {existing.file_id}"
            )
            await self._record_uploaded(request, existing, deduplicated=True)
            return CommitResult(stored_file=existing, deduplicated=True)

        metadata = await self._extract_metadata(request, assembled)

        storage_key = StorageKey.generate(request.file_name, request.category.value)
        await self._storage.put_file(storage_key, assembled.path, request.mime_type)

        stored_file = StoredFile(
            file_id=FileId.generate().value,
            file_name=sanitize_file_name(request.file_name),
            original_name=request.file_name,
            category=request.category,
            size_bytes=assembled.size_bytes,
            content_hash=assembled.content_hash,
            storage_key=storage_key.value,
            mime_type=request.mime_type,
            metadata=metadata,
            product_id=request.product_id,
            version_id=request.version_id,
            created_by=request.owner_id,
        )

        try:
            created = await self._repository.create(stored_file)
        except DuplicateContentHash:
            # Lost a concurrent first-write race on the same bytes
            await self._delete_unreferenced(storage_key)
            winner = await self._repository.get_by_hash(assembled.content_hash)
            if winner is None:
                raise
            logger.info(f"Upload {request.upload_id} lost dedup race to stored file {winner.file_id}")
            await self._record_uploaded(request, winner, deduplicated=True)
            return CommitResult(stored_file=winner, deduplicated=True)
        except Exception:
            await self._delete_unreferenced(storage_key)
            raise

        logger.info(
            f"Committed stored file {created.file_id} ({created.size_bytes} bytes) at {created.storage_key}"
        )
        await self._record_uploaded(request, created, deduplicated=False)
        return CommitResult(stored_file=created, deduplicated=False)

    async def _verify_integrity(self, request: CommitRequest, assembled: AssembledFile) -> None:
        errors = []
        if assembled.size_bytes != request.declared_size:
            errors.append(
                f"INTEGRITY_CHECK_FAILED: assembled size {assembled.size_bytes} bytes does not match "
                f"declared size {request.declared_size} bytes"
            )
        result = self._integrity_validator.validate_file_integrity(assembled.header, request.file_name)
        errors.extend(result.errors)
        if not errors:
            return

        await self._audit.security_alert(
            user_id=request.owner_id,
            entity_type="upload_session",
            entity_id=request.upload_id,
            reason="file_integrity_check_failed",
            file_name=request.file_name,
            category=request.category.value,
            errors=errors,
        )
        raise IntegrityCheckFailed(errors, upload_id=request.upload_id)

    async def _extract_metadata(self, request: CommitRequest, assembled: AssembledFile) -> FormatMetadata:
        try:
            return await self._metadata_extractor.extract(
                assembled.path, request.category, assembled.header
            )
        except MetadataExtractionFailed as e:
            logger.warning(f"Metadata extraction failed for upload {request.upload_id}: {e.message}")
            return ABSENT_METADATA
        except Exception:
            logger.exception(f"Unexpected metadata extraction error for upload {request.upload_id}")
            return ABSENT_METADATA

    async def _delete_unreferenced(self, storage_key: StorageKey) -> None:
        try:
            await self._storage.delete(storage_key)
        except OSError as e:
            logger.error(f"Failed to delete unreferenced object {storage_key}: {e}")

    async def _record_uploaded(self, request: CommitRequest, stored_file: StoredFile, deduplicated: bool) -> None:
        await self._audit.file_uploaded(
            user_id=request.owner_id,
            entity_type="product_file",
            entity_id=stored_file.file_id,
            metadata={
                "upload_id": request.upload_id,
                "file_name": request.file_name,
                "category": request.category.value,
                "size_bytes": stored_file.size_bytes,
                "content_hash": stored_file.content_hash,
                "storage_key": stored_file.storage_key,
                "product_id": request.product_id,
                "version_id": request.version_id,
                "deduplicated": deduplicated,
            },
        )
