"""Permission and RolePermission entities.

Permission names are opaque capability tokens (conventionally
``resource:action``); nothing in the core parses them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID


@dataclass
class Permission:
    """Named capability, globally unique by name."""

    id: Optional[UUID]
    name: str
    description: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Permission name cannot be empty")
        self.name = self.name.strip()

    def __str__(self) -> str:
        return f"Permission({self.name})"


@dataclass
class RolePermission:
    """Grant of one permission to one role; unique on (role_id, permission_id)."""

    id: Optional[UUID]
    role_id: UUID
    permission_id: UUID
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
