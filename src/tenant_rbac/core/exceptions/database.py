"""Persistence-level exceptions raised by repository implementations."""

from typing import Optional

from .base import TenantRbacError


class DatabaseError(TenantRbacError):
    """Base class for database-related errors."""
    pass


class RecordNotFoundError(DatabaseError):
    """Raised when an update or delete targets a row that does not exist."""

    def __init__(self, table: str, record_id: object):
        self.table = table
        self.record_id = record_id
        super().__init__(
            f"Record {record_id} not found in {table}",
            details={"table": table, "record_id": str(record_id)},
        )


class UniqueConstraintViolationError(DatabaseError):
    """Raised when a write would break a uniqueness constraint."""

    def __init__(self, table: str, constraint: Optional[str] = None):
        self.table = table
        self.constraint = constraint
        message = f"Unique constraint violated on {table}"
        if constraint:
            message += f" ({constraint})"
        super().__init__(message, details={"table": table, "constraint": constraint})
