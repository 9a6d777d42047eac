"""Permission entities package.

Domain entities and protocols for role and permission management.
"""

from .role import Role
from .permission import Permission, RolePermission
from .protocols import (
    RoleRepository,
    PermissionRepository,
    RolePermissionRepository,
    PermissionCache,
)

__all__ = [
    # Domain entities
    "Role",
    "Permission",
    "RolePermission",

    # Protocols
    "RoleRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "PermissionCache",
]
