"""Database access for tenant-rbac."""

from .connection import DatabaseManager
from .utils import rows_affected, build_optional

__all__ = [
    "DatabaseManager",
    "rows_affected",
    "build_optional",
]
