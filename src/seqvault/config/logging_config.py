"""Centralized logging configuration for seqvault.

Provides consistent, configurable logging with environment-based control
over verbosity and format.
"""

import logging
import logging.config
from enum import Enum
from typing import Any, Dict, Optional


AUDIT_LOGGER_NAME = "seqvault.audit"


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Supported log line formats."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}


class LoggingConfig:
    """Centralized logging configuration manager."""

    # Modules that should only log warnings and above
    QUIET_MODULES = [
        "asyncpg",
        "redis",
        "multipart",
    ]

    # Modules that should only log errors
    ERROR_ONLY_MODULES = [
        "httpx",
        "httpcore",
        "asyncio",
    ]

    @classmethod
    def build_config(cls, level: str = "INFO", log_format: str = "simple") -> Dict[str, Any]:
        """Build the ``dictConfig`` mapping for the given level and format."""
        level = LogLevel(level.upper()).value
        format_string = FORMAT_STRINGS[LogFormat(log_format.lower())]

        logging_config: Dict[str, Any] = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": format_string,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": "DEBUG",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {},
        }

        for module in cls.QUIET_MODULES:
            logging_config["loggers"][module] = {
                "level": "WARNING" if level != "DEBUG" else "DEBUG",
                "handlers": ["console"],
                "propagate": False,
            }

        for module in cls.ERROR_ONLY_MODULES:
            logging_config["loggers"][module] = {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            }

        # Audit trail is never filtered by verbosity
        logging_config["loggers"][AUDIT_LOGGER_NAME] = {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        }
        return logging_config

    @classmethod
    def configure(cls, level: Optional[str] = None, log_format: Optional[str] = None) -> None:
        """Configure logging, defaulting to the values in settings."""
        if level is None or log_format is None:
            from .settings import get_settings
            settings = get_settings()
            level = level or settings.log_level
            log_format = log_format or settings.log_format

        logging.config.dictConfig(cls.build_config(level, log_format))
        logging.getLogger(__name__).debug(
            f"Logging configured: level={level}, format={log_format}"
        )
