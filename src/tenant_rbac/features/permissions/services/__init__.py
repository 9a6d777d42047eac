"""Permission services package."""

from .role_resolver import RoleResolver
from .permission_resolver import PermissionResolver

__all__ = [
    "RoleResolver",
    "PermissionResolver",
]
