"""Pytest configuration and fixtures for seqvault tests."""

import hashlib
import struct
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

import pytest

from seqvault.uploads.application.services.upload_coordinator import create_upload_coordinator
from seqvault.uploads.core.exceptions import StorageWriteFailed
from seqvault.uploads.core.protocols import AuditAction, AuditEvent
from seqvault.uploads.infrastructure.repositories import (
    MemoryStoredFileRepository,
    MemoryUploadSessionStore,
    StaticProductOwnershipChecker,
)
from seqvault.uploads.infrastructure.storage import LocalChunkStaging, LocalStorageProvider

CHUNK_SIZE = 1024
OWNER = "user-owner"
INTRUDER = "user-intruder"


class RecordingAuditSink:
    """Audit sink that keeps every event in memory."""

    def __init__(self):
        self.events: List[AuditEvent] = []

    async def record(self, event: AuditEvent) -> None:
        self.events.append(event)

    def of(self, action: AuditAction) -> List[AuditEvent]:
        return [e for e in self.events if e.action is action]


class FailingAuditSink:
    """Audit sink whose backend is down."""

    async def record(self, event: AuditEvent) -> None:
        raise RuntimeError("audit backend unavailable")


class FakeClock:
    """Controllable clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class CountingStorageProvider(LocalStorageProvider):
    """Local storage that counts durable writes."""

    def __init__(self, root):
        super().__init__(root)
        self.put_file_calls = 0
        self.fail_writes = False

    async def put_file(self, storage_key, source_path, content_type=None):
        self.put_file_calls += 1
        if self.fail_writes:
            raise StorageWriteFailed("Failed to write file to storage", str(storage_key), "disk full")
        return await super().put_file(storage_key, source_path, content_type)


XSQ_DOCUMENT = b"""<?xml version="1.0" encoding="UTF-8"?>
<xsequence BaseChannel="0" ChanCtrlBasic="0" ChanCtrlColor="0" FixedPointTiming="1">
  <head>
    <version>2024.05</version>
    <author>Someone</author>
    <mediaFile>Jingle Bells.mp3</mediaFile>
    <sequenceType>Media</sequenceType>
    <sequenceTiming>50 ms</sequenceTiming>
  </head>
  <models>
    <model name="Arches"/>
    <model name="MegaTree"/>
  </models>
  <ElementEffects>
    <Element type="model" name="Arches">
      <EffectLayer>
        <Effect ref="0" name="On" startTime="0" endTime="500"/>
        <Effect ref="1" name="Twinkle" startTime="500" endTime="1000"/>
      </EffectLayer>
    </Element>
    <Element type="model" name="MegaTree">
      <EffectLayer>
        <Effect ref="2" name="Bars" startTime="0" endTime="1000"/>
      </EffectLayer>
    </Element>
  </ElementEffects>
</xsequence>
"""


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def fseq_bytes(size: int, channels: int = 512, frames: int = 1200, step_ms: int = 50) -> bytes:
    """A rendered show file of ``size`` bytes with a valid v2 header."""
    header = struct.pack("<4sHBBHIIBB", b"PSEQ", 32, 0, 2, 32, channels, frames, step_ms, 0)
    body = bytes((i * 7) % 251 for i in range(size - len(header)))
    return header + body


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def audit_sink():
    return RecordingAuditSink()


@pytest.fixture
def session_store():
    return MemoryUploadSessionStore()


@pytest.fixture
def staging(tmp_path: Path):
    return LocalChunkStaging(tmp_path / "staging")


@pytest.fixture
def storage(tmp_path: Path):
    return CountingStorageProvider(tmp_path / "storage")


@pytest.fixture
def repository():
    return MemoryStoredFileRepository()


@pytest.fixture
def ownership():
    return StaticProductOwnershipChecker({"product-1": OWNER})


@pytest.fixture
def coordinator(session_store, staging, storage, repository, audit_sink, ownership, clock):
    return create_upload_coordinator(
        store=session_store,
        staging=staging,
        storage=storage,
        repository=repository,
        audit_sink=audit_sink,
        ownership_checker=ownership,
        chunk_size=CHUNK_SIZE,
        session_ttl=timedelta(hours=24),
        clock=clock,
    )


@pytest.fixture
def upload_chunks(coordinator):
    """Initiate a RENDERED upload of ``content`` and submit every chunk."""

    async def _upload(content: bytes, file_name: str = "show.fseq", user_id: str = OWNER, **kwargs):
        initiated = await coordinator.initiate(
            owner_id=user_id,
            file_name=file_name,
            file_size=len(content),
            mime_type=kwargs.pop("mime_type", "application/octet-stream"),
            category=kwargs.pop("category", "RENDERED"),
            **kwargs,
        )
        for index in range(initiated.total_chunks):
            part = content[index * CHUNK_SIZE:(index + 1) * CHUNK_SIZE]
            await coordinator.submit_chunk(initiated.upload_id, user_id, index, sha256(part), part)
        return initiated

    return _upload
