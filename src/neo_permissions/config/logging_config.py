"""Logging configuration for neo-permissions.

Console logging driven by environment variables, with third-party modules
that are chatty at DEBUG kept at ERROR.
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict


class LogVerbosity(str, Enum):
    """Log verbosity modes."""
    QUIET = "QUIET"      # Only errors and critical
    NORMAL = "NORMAL"    # Standard logging (warnings and above)
    VERBOSE = "VERBOSE"  # Info level logging
    DEBUG = "DEBUG"      # Full debug logging


_VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: "ERROR",
    LogVerbosity.NORMAL: "WARNING",
    LogVerbosity.VERBOSE: "INFO",
    LogVerbosity.DEBUG: "DEBUG",
}

_FORMATS = {
    "json": '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    "simple": "%(asctime)s - %(levelname)s - %(message)s",
}


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Map verbosity mode to log level; unknown modes fall back to WARNING."""
    try:
        return _VERBOSITY_LEVELS[LogVerbosity(verbosity.upper())]
    except ValueError:
        return "WARNING"


class LoggingConfig:
    """Centralized logging configuration manager."""

    ERROR_ONLY_MODULES = [
        "asyncio",
        "redis",
    ]

    @classmethod
    def build(cls) -> Dict[str, Any]:
        """Build a dictConfig mapping from the environment."""
        log_verbosity = os.getenv("LOG_VERBOSITY")
        if log_verbosity:
            level = get_log_level_from_verbosity(log_verbosity)
        else:
            level = os.getenv("LOG_LEVEL", "INFO").upper()
        format_string = _FORMATS.get(os.getenv("LOG_FORMAT", "simple"), _FORMATS["simple"])

        return {
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
                    "level": level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {
                module: {"level": "ERROR", "propagate": True}
                for module in cls.ERROR_ONLY_MODULES
            },
        }

    @classmethod
    def configure(cls) -> None:
        """Configure logging based on environment variables."""
        logging.config.dictConfig(cls.build())
