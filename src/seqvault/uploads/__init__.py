"""Chunked upload feature: sessions, chunk ingestion, finalize, abort."""
