"""Runtime configuration: settings and logging."""

from .settings import UploadSettings, get_settings
from .logging_config import LoggingConfig

__all__ = ["UploadSettings", "get_settings", "LoggingConfig"]
