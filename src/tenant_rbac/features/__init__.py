"""Features module for tenant-rbac.

Each feature owns its entities, repository protocols and implementations,
and services:
- tenants: domain to company resolution
- permissions: roles, permissions and their grants
- users: users and memberships
- access: allow/deny decisions
"""

from .tenants import TenantResolver
from .permissions import RoleResolver, PermissionResolver
from .users import MembershipService
from .access import AccessGuard, AccessDecision, AccessContext

__all__ = [
    "TenantResolver",
    "RoleResolver",
    "PermissionResolver",
    "MembershipService",
    "AccessGuard",
    "AccessDecision",
    "AccessContext",
]
