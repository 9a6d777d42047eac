"""Company (tenant) domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID


@dataclass
class Company:
    """Tenant: the unit of isolation for memberships and custom roles.

    Matches the companies table structure.
    """

    id: Optional[UUID]
    name: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Company name cannot be empty")
