"""Role domain entity.

A role is either a system role (``company_id`` is None, name reserved) or a
custom role owned by exactly one company.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from ....config.constants import is_system_role_name


@dataclass
class Role:
    """Domain entity for a role; (name, company_id) is unique."""

    id: Optional[UUID]
    name: str
    description: Optional[str] = None
    company_id: Optional[UUID] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Role name cannot be empty")
        self.name = self.name.strip()

    @property
    def has_system_name(self) -> bool:
        """True when the name is reserved, regardless of the stored company."""
        return is_system_role_name(self.name)

    @property
    def is_system_scoped(self) -> bool:
        """True when the role is not owned by any company."""
        return self.company_id is None

    def __str__(self) -> str:
        return f"Role({self.name})"
