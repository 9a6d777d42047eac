"""Helpers shared by the asyncpg repositories."""

from typing import Any, Callable, Mapping, Optional, TypeVar

T = TypeVar("T")


def rows_affected(status: str) -> int:
    """Parse the row count from an asyncpg command status such as ``DELETE 1``."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


def build_optional(row: Optional[Mapping[str, Any]], builder: Callable[[Mapping[str, Any]], T]) -> Optional[T]:
    """Build an entity from a row, or return None when the row is missing."""
    return builder(row) if row else None
