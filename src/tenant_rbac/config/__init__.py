"""Configuration for tenant-rbac."""

from .constants import (
    SystemRole,
    SYSTEM_ROLE_NAMES,
    SYSTEM_ADMIN_ROLE,
    DenyReason,
    Tables,
    CacheKeys,
    CacheTTL,
    is_system_role_name,
)
from .settings import RbacSettings, get_settings
from .logging_config import LoggingConfig, setup_logging

__all__ = [
    "SystemRole",
    "SYSTEM_ROLE_NAMES",
    "SYSTEM_ADMIN_ROLE",
    "DenyReason",
    "Tables",
    "CacheKeys",
    "CacheTTL",
    "is_system_role_name",
    "RbacSettings",
    "get_settings",
    "LoggingConfig",
    "setup_logging",
]
