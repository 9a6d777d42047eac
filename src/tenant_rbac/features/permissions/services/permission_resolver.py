"""Permission resolution: expands a role into the capabilities it grants.

Permission names are opaque tokens (typically ``resource:action``); nothing
here interprets their structure.
"""

import logging
from typing import List, Optional
from uuid import UUID

from ....core.exceptions import (
    PermissionAlreadyExistsError,
    PermissionNotFoundError,
    RoleNotFoundError,
    UniqueConstraintViolationError,
    ValidationError,
)
from ..entities import (
    Permission,
    PermissionCache,
    PermissionRepository,
    RolePermission,
    RolePermissionRepository,
    RoleRepository,
)


logger = logging.getLogger(__name__)


class PermissionResolver:
    """Resolves and manages role permission grants.

    An optional :class:`PermissionCache` stores the resolved permission
    names per role; grants and revocations invalidate the role's entry.
    """

    def __init__(
        self,
        permission_repository: PermissionRepository,
        role_permission_repository: RolePermissionRepository,
        role_repository: RoleRepository,
        cache: Optional[PermissionCache] = None,
    ):
        self._permissions = permission_repository
        self._grants = role_permission_repository
        self._roles = role_repository
        self._cache = cache

    async def resolve_permissions(self, role_id: UUID) -> List[Permission]:
        """Permissions granted to ``role_id``, in grant order.

        A role without grants yields an empty list.

        Raises:
            RoleNotFoundError: the role does not exist
        """
        if await self._roles.find_by_id(role_id) is None:
            raise RoleNotFoundError(role_id)

        grants = await self._grants.find_by_role_id(role_id)
        if not grants:
            return []

        permission_ids = list(dict.fromkeys(grant.permission_id for grant in grants))
        by_id = {p.id: p for p in await self._permissions.find_by_ids(permission_ids)}
        return [by_id[pid] for pid in permission_ids if pid in by_id]

    async def resolve_permission_names(self, role_id: UUID) -> List[str]:
        """Names of the permissions granted to ``role_id``, de-duplicated.

        The cache version is read before the store; if a grant, revoke or
        role deletion invalidates the role meanwhile, the result is returned
        but not cached.
        """
        version = None
        if self._cache is not None:
            cached = await self._cache.get_role_permissions(role_id)
            if cached is not None:
                return cached
            version = await self._cache.get_role_version(role_id)

        names = list(dict.fromkeys(p.name for p in await self.resolve_permissions(role_id)))

        if version is not None:
            await self._cache.set_role_permissions(role_id, names, version)
        return names

    async def find_permission(self, permission_id: UUID) -> Optional[Permission]:
        return await self._permissions.find_by_id(permission_id)

    async def create_permission(self, name: str, description: Optional[str] = None) -> Permission:
        name = self._validate_name(name)
        if await self._permissions.find_by_name(name) is not None:
            raise PermissionAlreadyExistsError(name)
        try:
            permission = await self._permissions.create(Permission(id=None, name=name, description=description))
        except UniqueConstraintViolationError:
            raise PermissionAlreadyExistsError(name)

        logger.info(f"Created permission {permission.name} ({permission.id})")
        return permission

    async def get_or_create_permission(self, name: str, description: Optional[str] = None) -> Permission:
        """Find-or-create; an existing permission is returned untouched."""
        name = self._validate_name(name)
        existing = await self._permissions.find_by_name(name)
        if existing is not None:
            return existing
        try:
            return await self._permissions.create(Permission(id=None, name=name, description=description))
        except UniqueConstraintViolationError:
            existing = await self._permissions.find_by_name(name)
            if existing is None:
                raise
            return existing

    async def grant_permission(self, role_id: UUID, permission_id: UUID) -> RolePermission:
        """Grant a permission to a role; an existing grant is returned as is."""
        if await self._roles.find_by_id(role_id) is None:
            raise RoleNotFoundError(role_id)
        if await self._permissions.find_by_id(permission_id) is None:
            raise PermissionNotFoundError(permission_id)

        existing = await self._grants.find(role_id, permission_id)
        if existing is not None:
            return existing

        try:
            grant = await self._grants.create(RolePermission(id=None, role_id=role_id, permission_id=permission_id))
        except UniqueConstraintViolationError:
            existing = await self._grants.find(role_id, permission_id)
            if existing is None:
                raise
            return existing

        await self._invalidate(role_id)
        logger.info(f"Granted permission {permission_id} to role {role_id}")
        return grant

    async def revoke_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        """Remove a grant. Returns False when there was nothing to remove."""
        removed = await self._grants.delete(role_id, permission_id)
        if removed:
            await self._invalidate(role_id)
            logger.info(f"Revoked permission {permission_id} from role {role_id}")
        return removed

    async def _invalidate(self, role_id: UUID) -> None:
        if self._cache is not None:
            await self._cache.invalidate_role(role_id)

    @staticmethod
    def _validate_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Permission name cannot be empty")
        return name
