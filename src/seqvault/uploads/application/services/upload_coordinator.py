"""Upload coordinator.

ONLY wiring - one facade over the upload commands, the progress query and
the cleanup service, built from shared collaborators.

Following maximum separation architecture - one file = one purpose.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from ....utils.datetime import utc_now
from ..commands import (
    AbortUploadCommand,
    AbortUploadData,
    AbortUploadResult,
    CompleteUploadCommand,
    CompleteUploadData,
    CompleteUploadResult,
    InitiateUploadCommand,
    InitiateUploadData,
    InitiateUploadResult,
    SimpleUploadCommand,
    SimpleUploadData,
    SubmitChunkCommand,
    SubmitChunkData,
    SubmitChunkResult,
    create_abort_upload_command,
    create_complete_upload_command,
    create_initiate_upload_command,
    create_simple_upload_command,
    create_submit_chunk_command,
)
from ..queries import GetUploadProgressQuery, UploadProgress, create_get_upload_progress_query
from ..validators import FileValidator, create_file_integrity_validator, create_file_validator
from ...core.protocols import (
    AuditSink,
    ChunkStagingArea,
    ProductOwnershipChecker,
    StorageProvider,
    StoredFileRepository,
    UploadSessionStore,
)
from ...core.value_objects import FileCategory
from .audit_recorder import AuditRecorder
from .cleanup_service import CleanupService, CleanupServiceConfig, create_cleanup_service
from .file_assembler import create_file_assembler
from .metadata_extractor import MetadataExtractor, create_metadata_extractor
from .product_access import ProductAccessPolicy
from .session_guard import SessionGuard
from .stored_file_committer import StoredFileCommitter


class UploadCoordinator:
    """Entry point for every upload operation."""

    def __init__(
        self,
        initiate: InitiateUploadCommand,
        submit_chunk: SubmitChunkCommand,
        complete: CompleteUploadCommand,
        abort: AbortUploadCommand,
        simple: SimpleUploadCommand,
        progress: GetUploadProgressQuery,
        cleanup: CleanupService,
    ):
        self._initiate = initiate
        self._submit_chunk = submit_chunk
        self._complete = complete
        self._abort = abort
        self._simple = simple
        self._progress = progress
        self.cleanup = cleanup

    @property
    def chunk_size(self) -> int:
        """Chunk size fixed for every session this deployment opens."""
        return self._initiate.chunk_size

    async def initiate(
        self,
        owner_id: str,
        file_name: str,
        file_size: int,
        mime_type: str,
        category: Union[FileCategory, str],
        product_id: Optional[str] = None,
        version_id: Optional[str] = None,
    ) -> InitiateUploadResult:
        return await self._initiate.execute(InitiateUploadData(
            owner_id=owner_id,
            file_name=file_name,
            file_size=file_size,
            mime_type=mime_type,
            category=category,
            product_id=product_id,
            version_id=version_id,
        ))

    async def submit_chunk(
        self,
        upload_id: str,
        user_id: str,
        chunk_index: int,
        chunk_hash: str,
        content: bytes,
    ) -> SubmitChunkResult:
        return await self._submit_chunk.execute(SubmitChunkData(
            upload_id=upload_id,
            user_id=user_id,
            chunk_index=chunk_index,
            chunk_hash=chunk_hash,
            content=content,
        ))

    async def complete_upload(self, upload_id: str, user_id: str) -> CompleteUploadResult:
        return await self._complete.execute(CompleteUploadData(upload_id=upload_id, user_id=user_id))

    async def abort_upload(self, upload_id: str, user_id: str) -> AbortUploadResult:
        return await self._abort.execute(AbortUploadData(upload_id=upload_id, user_id=user_id))

    async def get_progress(self, upload_id: str, user_id: str) -> UploadProgress:
        return await self._progress.execute(upload_id, user_id)

    async def simple_upload(
        self,
        owner_id: str,
        file_name: str,
        mime_type: str,
        category: Union[FileCategory, str],
        content: bytes,
        product_id: Optional[str] = None,
        version_id: Optional[str] = None,
    ) -> CompleteUploadResult:
        return await self._simple.execute(SimpleUploadData(
            owner_id=owner_id,
            file_name=file_name,
            mime_type=mime_type,
            category=category,
            content=content,
            product_id=product_id,
            version_id=version_id,
        ))


def create_upload_coordinator(
    store: UploadSessionStore,
    staging: ChunkStagingArea,
    storage: StorageProvider,
    repository: StoredFileRepository,
    audit_sink: Optional[AuditSink] = None,
    ownership_checker: Optional[ProductOwnershipChecker] = None,
    chunk_size: int = 5 * 1024 * 1024,
    session_ttl: timedelta = timedelta(hours=24),
    header_probe_bytes: int = 1024,
    cleanup_config: Optional[CleanupServiceConfig] = None,
    validator: Optional[FileValidator] = None,
    metadata_extractor: Optional[MetadataExtractor] = None,
    clock: Callable[[], datetime] = utc_now,
) -> UploadCoordinator:
    """Create upload coordinator from its collaborators."""
    validator = validator or create_file_validator()
    audit = AuditRecorder(audit_sink, clock)
    guard = SessionGuard(store, staging, clock)
    product_access = ProductAccessPolicy(ownership_checker)
    assembler = create_file_assembler(staging, header_probe_bytes)
    committer = StoredFileCommitter(
        repository,
        storage,
        audit,
        create_file_integrity_validator(),
        metadata_extractor or create_metadata_extractor(),
    )

    return UploadCoordinator(
        initiate=create_initiate_upload_command(
            store, validator, product_access, audit, chunk_size, session_ttl, clock
        ),
        submit_chunk=create_submit_chunk_command(store, staging, guard, audit),
        complete=create_complete_upload_command(store, guard, assembler, committer, audit),
        abort=create_abort_upload_command(store, guard, audit),
        simple=create_simple_upload_command(validator, product_access, guard, assembler, committer),
        progress=create_get_upload_progress_query(guard),
        cleanup=create_cleanup_service(store, staging, cleanup_config, clock),
    )

