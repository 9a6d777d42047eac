"""Membership (user role) entity.

Binds one user to one role inside one company. The (user_id, company_id)
pair is fixed at creation; only role_id may change afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID


@dataclass
class Membership:
    """A user's role in a company; at most one row per (user_id, company_id)."""

    id: Optional[UUID]
    user_id: UUID
    company_id: UUID
    role_id: UUID
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
