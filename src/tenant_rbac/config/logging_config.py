"""Centralized logging configuration for tenant-rbac.

Builds a ``logging.config.dictConfig`` from :class:`RbacSettings` so that
applications embedding the RBAC core get consistent console output.
"""

import logging
import logging.config
from enum import Enum
from typing import Any, Dict, Optional

from .settings import RbacSettings, get_settings


class LogFormat(str, Enum):
    """Log format options."""
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

    # Modules that should only log errors
    ERROR_ONLY_MODULES = [
        "asyncio",
    ]

    # Driver modules kept at WARNING unless debugging
    QUIET_MODULES = [
        "asyncpg",
        "redis",
    ]

    @classmethod
    def build(cls, settings: RbacSettings) -> Dict[str, Any]:
        """Build a dictConfig mapping for the given settings."""
        level = settings.log_level
        format_string = FORMAT_STRINGS[LogFormat(settings.log_format)]

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
                    "level": level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {}
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

        return logging_config

    @classmethod
    def configure(cls, settings: Optional[RbacSettings] = None) -> None:
        """Apply logging configuration."""
        settings = settings or get_settings()
        logging.config.dictConfig(cls.build(settings))

        logger = logging.getLogger(__name__)
        if settings.log_level == "DEBUG":
            logger.debug(f"Logging configured: level={settings.log_level}, format={settings.log_format}")

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        """Set log level for a specific module."""
        logging.getLogger(module_name).setLevel(getattr(logging, level.upper()))


def setup_logging(settings: Optional[RbacSettings] = None) -> None:
    """Setup logging configuration.

    This is the main entry point for configuring logging in the application.
    It should be called once at application startup.
    """
    LoggingConfig.configure(settings)
