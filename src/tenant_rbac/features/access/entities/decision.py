"""Value objects produced by the access guard."""

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from ....config.constants import DenyReason
from ...permissions.entities import Role


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an authorization request.

    ``role`` and ``permissions`` carry whatever was resolved before the
    decision was made, so callers can surface them even on a deny.
    """

    allowed: bool
    reason: Optional[DenyReason] = None
    role: Optional[Role] = None
    permissions: List[str] = field(default_factory=list)

    @classmethod
    def allow(cls, role: Optional[Role] = None, permissions: Optional[List[str]] = None) -> "AccessDecision":
        return cls(allowed=True, role=role, permissions=list(permissions or []))

    @classmethod
    def deny(
        cls,
        reason: DenyReason,
        role: Optional[Role] = None,
        permissions: Optional[List[str]] = None,
    ) -> "AccessDecision":
        return cls(allowed=False, reason=reason, role=role, permissions=list(permissions or []))

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class AccessContext:
    """A user's resolved standing inside one company."""

    user_id: UUID
    company_id: UUID
    role: Role
    permissions: List[str] = field(default_factory=list)
    is_system_admin: bool = False

    def has_permission(self, permission: str) -> bool:
        return self.is_system_admin or permission in self.permissions
