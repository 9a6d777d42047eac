"""Permission repositories package.

Concrete implementations of role and permission data access protocols
using AsyncPG, plus the Redis permission cache.
"""

from .role_repository import AsyncPGRoleRepository
from .permission_repository import AsyncPGPermissionRepository, AsyncPGRolePermissionRepository
from .permission_cache import RedisPermissionCache

__all__ = [
    "AsyncPGRoleRepository",
    "AsyncPGPermissionRepository",
    "AsyncPGRolePermissionRepository",
    "RedisPermissionCache",
]
