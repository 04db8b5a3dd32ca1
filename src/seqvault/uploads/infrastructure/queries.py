"""Stored file SQL query constants.

Centralized SQL for stored file metadata and product ownership lookups.
All queries are parameterized by schema.

Following maximum separation architecture - one file = one purpose.
"""

# Schema bootstrap
STORED_FILES_CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS {schema}.stored_files (
        id UUID PRIMARY KEY,
        file_name TEXT NOT NULL,
        original_name TEXT NOT NULL,
        category TEXT NOT NULL,
        size_bytes BIGINT NOT NULL CHECK (size_bytes > 0),
        content_hash CHAR(64) NOT NULL,
        storage_key TEXT NOT NULL,
        mime_type TEXT NOT NULL,
        metadata JSONB NOT NULL DEFAULT '{{}}'::jsonb,
        product_id TEXT,
        version_id TEXT,
        created_by TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""

STORED_FILES_CREATE_HASH_INDEX = """
    CREATE UNIQUE INDEX IF NOT EXISTS stored_files_content_hash_key
    ON {schema}.stored_files (content_hash)
"""

# Stored file queries
STORED_FILE_INSERT = """
    INSERT INTO {schema}.stored_files (
        id, file_name, original_name, category, size_bytes, content_hash,
        storage_key, mime_type, metadata, product_id, version_id,
        created_by, created_at
    ) VALUES (
        $1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13
    )
    ON CONFLICT (content_hash) DO NOTHING
    RETURNING *
"""

STORED_FILE_GET_BY_HASH = """
    SELECT * FROM {schema}.stored_files
    WHERE content_hash = $1
"""

STORED_FILE_GET_BY_ID = """
    SELECT * FROM {schema}.stored_files
    WHERE id = $1
"""

# Product ownership
PRODUCT_OWNED_BY = """
    SELECT 1 FROM {schema}.products
    WHERE id = $1 AND creator_id = $2
"""
