"""Tests for the logging audit sink."""

import json
import logging

import pytest

from seqvault.uploads.core.protocols import AuditAction, AuditEvent, AuditSeverity
from seqvault.uploads.infrastructure.audit import LoggingAuditSink


@pytest.mark.asyncio
async def test_events_logged_as_json(caplog):
    logger = logging.getLogger("tests.audit")
    sink = LoggingAuditSink(logger)

    with caplog.at_level(logging.INFO, logger="tests.audit"):
        await sink.record(AuditEvent(
            action=AuditAction.FILE_UPLOADED,
            user_id="user-1",
            entity_type="product_file",
            entity_id="file-1",
            metadata={"deduplicated": False},
        ))
        await sink.record(AuditEvent(
            action=AuditAction.SECURITY_ALERT,
            user_id="user-2",
            entity_type="upload_session",
            entity_id="upl_x",
            metadata={"reason": "chunk_hash_mismatch"},
            severity=AuditSeverity.SECURITY,
        ))

    assert [r.levelno for r in caplog.records] == [logging.INFO, logging.WARNING]
    first = json.loads(caplog.records[0].getMessage())
    assert first["action"] == "FILE_UPLOADED"
    assert first["metadata"] == {"deduplicated": False}
    assert json.loads(caplog.records[1].getMessage())["severity"] == "security"
