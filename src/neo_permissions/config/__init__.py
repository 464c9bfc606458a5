"""Configuration for neo-permissions."""

from .settings import PermissionSettings, get_settings
from .logging_config import LoggingConfig, LogVerbosity, get_log_level_from_verbosity

__all__ = [
    "PermissionSettings",
    "get_settings",
    "LoggingConfig",
    "LogVerbosity",
    "get_log_level_from_verbosity",
]
