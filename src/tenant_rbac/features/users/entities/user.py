"""User domain entity.

Authentication data (password hashes, tokens) is deliberately absent: the
RBAC core only works with an already verified identity.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID


@dataclass
class User:
    """Identity with activation flag and last-login metadata."""

    id: Optional[UUID]
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    last_login_ip: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        self.email = (self.email or "").strip().lower()
        if "@" not in self.email:
            raise ValueError(f"Invalid email address: {self.email!r}")

    @property
    def email_domain(self) -> str:
        return self.email.rpartition("@")[2]
