"""Constants and enums for tenant-rbac.

Reserved role names, access decision reasons and database table names
shared by the features and their repositories.
"""

from enum import Enum
from typing import Final, FrozenSet


class SystemRole(str, Enum):
    """Reserved names of the platform-wide roles (company_id IS NULL)."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"


SYSTEM_ROLE_NAMES: Final[FrozenSet[str]] = frozenset(role.value for role in SystemRole)

# Role whose holders are treated as platform administrators
SYSTEM_ADMIN_ROLE: Final[str] = SystemRole.ADMIN.value


class DenyReason(str, Enum):
    """Why an authorization request was denied."""

    COMPANY_NOT_FOUND = "company_not_found"
    COMPANY_INACTIVE = "company_inactive"
    NO_MEMBERSHIP = "no_membership"
    ROLE_OUT_OF_SCOPE = "role_out_of_scope"
    MISSING_PERMISSION = "missing_permission"


class Tables:
    """Table names used by the asyncpg repositories."""

    USERS: Final[str] = "users"
    COMPANIES: Final[str] = "companies"
    DOMAINS: Final[str] = "domains"
    COMPANY_DOMAINS: Final[str] = "company_domains"
    ROLES: Final[str] = "roles"
    PERMISSIONS: Final[str] = "permissions"
    ROLE_PERMISSIONS: Final[str] = "role_permissions"
    USER_ROLES: Final[str] = "user_roles"


class CacheKeys:
    """Cache key patterns for Redis."""

    ROLE_PERMISSIONS: Final[str] = "rbac:role:permissions:{role_id}"
    ROLE_PERMISSIONS_VERSION: Final[str] = "rbac:role:permissions:version:{role_id}"


class CacheTTL:
    """Cache TTL values in seconds."""

    ROLE_PERMISSIONS: Final[int] = 600  # 10 minutes


def is_system_role_name(name: str) -> bool:
    """Check whether a role name is one of the reserved system names."""
    return name in SYSTEM_ROLE_NAMES
