"""Permissions feature for tenant-rbac.

Feature-First layout:
- entities/: Role, Permission, RolePermission and protocols
- repositories/: AsyncPG implementations and the Redis permission cache
- services/: RoleResolver and PermissionResolver
"""

# Core entities and protocols
from .entities import (
    Role,
    Permission,
    RolePermission,
    RoleRepository,
    PermissionRepository,
    RolePermissionRepository,
    PermissionCache,
)

# Concrete repository implementations
from .repositories import (
    AsyncPGRoleRepository,
    AsyncPGPermissionRepository,
    AsyncPGRolePermissionRepository,
    RedisPermissionCache,
)

# Services
from .services import RoleResolver, PermissionResolver

__all__ = [
    # Entities
    "Role",
    "Permission",
    "RolePermission",

    # Protocols
    "RoleRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "PermissionCache",

    # Repository implementations
    "AsyncPGRoleRepository",
    "AsyncPGPermissionRepository",
    "AsyncPGRolePermissionRepository",
    "RedisPermissionCache",

    # Services
    "RoleResolver",
    "PermissionResolver",
]
