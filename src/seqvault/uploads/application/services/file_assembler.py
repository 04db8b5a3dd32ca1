"""File assembler.

ONLY file assembly - concatenates staged chunks in strict index order
into one workspace file, hashing and capturing the header as it goes.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import aiofiles

from ....utils.hashing import IncrementalHasher
from ...core.entities import UploadSession
from ...core.exceptions import IntegrityCheckFailed, StorageWriteFailed
from ...core.protocols import ChunkStagingArea

logger = logging.getLogger(__name__)

ASSEMBLED_FILE_NAME = "assembled.bin"
READ_BLOCK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class AssembledFile:
    """A fully reassembled candidate file in the staging workspace."""

    path: Path
    size_bytes: int
    content_hash: str
    header: bytes


class FileAssembler:
    """Streams staged chunks into a single file.

    The content hash is computed over exactly the bytes written, so it is
    identical to hashing the concatenated chunks in memory.
    """

    def __init__(self, staging: ChunkStagingArea, header_probe_bytes: int = 1024):
        self._staging = staging
        self._header_probe_bytes = header_probe_bytes

    async def assemble(self, session: UploadSession) -> AssembledFile:
        """Assemble every chunk of ``session`` in index order.

        Raises:
            IntegrityCheckFailed: If a staged chunk is missing
            StorageWriteFailed: If the workspace cannot be written
        """
        upload_id = session.upload_id
        workspace = await self._staging.workspace(upload_id)
        output = workspace / ASSEMBLED_FILE_NAME
        hasher = IncrementalHasher()
        header = bytearray()

        logger.info(f"Assembling {session.total_chunks} chunks for upload {upload_id}")
        try:
            async with aiofiles.open(output, "wb") as out:
                for index in range(session.total_chunks):
                    chunk_path = self._staging.chunk_path(upload_id, index)
                    try:
                        async with aiofiles.open(chunk_path, "rb") as infile:
                            while True:
                                block = await infile.read(READ_BLOCK_SIZE)
                                if not block:
                                    break
                                await out.write(block)
                                hasher.update(block)
                                if len(header) < self._header_probe_bytes:
                                    header.extend(block[:self._header_probe_bytes - len(header)])
                    except FileNotFoundError as e:
                        logger.error(f"Missing staged chunk {index} for upload {upload_id}")
                        raise IntegrityCheckFailed(
                            [f"INTEGRITY_CHECK_FAILED: staged chunk {index} is missing"],
                            upload_id=upload_id,
                        ) from e
        except OSError as e:
            raise StorageWriteFailed("Failed to assemble upload", reason=str(e)) from e

        return AssembledFile(
            path=output,
            size_bytes=hasher.bytes_hashed,
            content_hash=hasher.hexdigest(),
            header=bytes(header),
        )

    async def materialize(self, workspace_id: str, content: bytes) -> AssembledFile:
        """Write a single-request upload into a workspace, same shape as ``assemble``."""
        workspace = await self._staging.workspace(workspace_id)
        output = workspace / ASSEMBLED_FILE_NAME
        hasher = IncrementalHasher()
        hasher.update(content)
        try:
            async with aiofiles.open(output, "wb") as out:
                await out.write(content)
        except OSError as e:
            raise StorageWriteFailed("Failed to stage upload", reason=str(e)) from e

        return AssembledFile(
            path=output,
            size_bytes=hasher.bytes_hashed,
            content_hash=hasher.hexdigest(),
            header=bytes(content[:self._header_probe_bytes]),
        )


def create_file_assembler(staging: ChunkStagingArea, header_probe_bytes: int = 1024) -> FileAssembler:
    """Create file assembler."""
    return FileAssembler(staging, header_probe_bytes)
