"""Tenant-RBAC - multi-tenant role-based access control core.

Resolves tenants from domains, roles and permissions from memberships, and
renders access decisions. Persistence is reached through repository
protocols; asyncpg and Redis implementations are provided.

Logging is not configured on import; call :func:`setup_logging` from the
application bootstrap.
"""

from .__version__ import __version__

# Configuration
from .config import (
    RbacSettings,
    get_settings,
    LoggingConfig,
    setup_logging,
    SystemRole,
    DenyReason,
    SYSTEM_ROLE_NAMES,
)

from .core.exceptions import (
    # Base Exception
    TenantRbacError,

    # Error kinds
    NotFoundError,
    InactiveError,
    ConflictError,
    ForbiddenError,
    ValidationError,

    # Persistence
    DatabaseError,
    RecordNotFoundError,
    UniqueConstraintViolationError,

    # Utility Functions
    create_error_response,
)

# Database
from .database import DatabaseManager

# Features
from .features.tenants import Company, Domain, CompanyDomain, TenantResolver
from .features.permissions import Role, Permission, RolePermission, RoleResolver, PermissionResolver
from .features.users import User, Membership, MembershipService
from .features.access import AccessGuard, AccessDecision, AccessContext

__all__ = [
    "__version__",

    # Configuration
    "RbacSettings",
    "get_settings",
    "LoggingConfig",
    "setup_logging",
    "SystemRole",
    "DenyReason",
    "SYSTEM_ROLE_NAMES",

    # Exceptions
    "TenantRbacError",
    "NotFoundError",
    "InactiveError",
    "ConflictError",
    "ForbiddenError",
    "ValidationError",
    "DatabaseError",
    "RecordNotFoundError",
    "UniqueConstraintViolationError",
    "create_error_response",

    # Database
    "DatabaseManager",

    # Entities
    "Company",
    "Domain",
    "CompanyDomain",
    "Role",
    "Permission",
    "RolePermission",
    "User",
    "Membership",

    # Services
    "TenantResolver",
    "RoleResolver",
    "PermissionResolver",
    "MembershipService",
    "AccessGuard",
    "AccessDecision",
    "AccessContext",
]
