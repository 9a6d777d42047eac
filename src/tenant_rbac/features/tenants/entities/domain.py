"""Domain and CompanyDomain entities.

A domain is a namespace string (typically an email suffix) used to resolve
an inbound identity to the company that owns it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID


def normalize_domain_name(name: str) -> str:
    """Domains are stored and looked up lower-case, without surrounding whitespace."""
    return name.strip().lower()


@dataclass
class Domain:
    """Globally unique domain name, linked to at most one company."""

    id: Optional[UUID]
    name: str
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        normalized = normalize_domain_name(self.name or "")
        if not normalized:
            raise ValueError("Domain name cannot be empty")
        self.name = normalized


@dataclass
class CompanyDomain:
    """Join row linking one company to one domain; unique on (company_id, domain_id)."""

    id: Optional[UUID]
    company_id: UUID
    domain_id: UUID
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
