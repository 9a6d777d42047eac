"""Access feature for tenant-rbac.

Top-level allow/deny decisions composed from the tenants, permissions and
users features.
"""

from .entities import AccessDecision, AccessContext
from .services import AccessGuard

__all__ = [
    "AccessDecision",
    "AccessContext",
    "AccessGuard",
]
