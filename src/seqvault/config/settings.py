"""
Configuration management for seqvault.

Every knob is read from the environment (prefix ``SEQVAULT_``) or an
optional ``.env`` file.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CHUNK_SIZE = 5 * 1024 * 1024
DEFAULT_SESSION_TTL_SECONDS = 24 * 60 * 60


class UploadSettings(BaseSettings):
    """Settings for the upload service."""

    model_config = SettingsConfigDict(
        env_prefix="SEQVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = Field(default="seqvault")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, gt=0, lt=65536)

    # Upload pipeline
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    session_ttl_seconds: int = Field(default=DEFAULT_SESSION_TTL_SECONDS, gt=0)
    header_probe_bytes: int = Field(default=1024, ge=16)

    # Filesystem
    staging_dir: Path = Field(default=Path("./var/staging"))
    storage_dir: Path = Field(default=Path("./var/storage"))

    # Session store (in-memory when unset)
    redis_url: Optional[str] = Field(default=None)
    redis_key_prefix: str = Field(default="seqvault:upload:")

    # Stored file metadata (in-memory when unset)
    database_url: Optional[str] = Field(default=None)
    database_schema: str = Field(default="public")
    db_pool_size: int = Field(default=10, gt=0)

    # Per-user upload quota; 0 disables it. Counters live in Redis when redis_url is set
    upload_rate_limit: int = Field(default=10, ge=0)
    upload_rate_window_seconds: int = Field(default=3600, gt=0)
    rate_limit_key_prefix: str = Field(default="seqvault:ratelimit:")

    # Background cleanup; 0 disables the sweeper
    sweep_interval_seconds: int = Field(default=300, ge=0)
    orphan_staging_grace_seconds: int = Field(default=3600, ge=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="simple")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in {"simple", "detailed", "json"}:
            raise ValueError(f"log_format must be simple, detailed or json, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("database_schema")
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if not v.replace("_", "").isalnum():
            raise ValueError(f"Invalid database schema name: {v}")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> UploadSettings:
    """Get cached settings instance."""
    return UploadSettings()
