"""Protocol interfaces for role and permission persistence.

Implementations raise ``RecordNotFoundError`` when updating or deleting a
missing row and ``UniqueConstraintViolationError`` on duplicate keys.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable
from uuid import UUID

from .permission import Permission, RolePermission
from .role import Role


@runtime_checkable
class RoleRepository(Protocol):
    """Protocol for role data access operations."""

    @abstractmethod
    async def create(self, role: Role) -> Role:
        ...

    @abstractmethod
    async def find_by_id(self, role_id: UUID) -> Optional[Role]:
        ...

    @abstractmethod
    async def find_by_name(self, name: str, company_id: Optional[UUID]) -> Optional[Role]:
        """Scope-exact lookup: ``company_id=None`` matches only system-scoped rows."""
        ...

    @abstractmethod
    async def find_by_company(self, company_id: Optional[UUID]) -> List[Role]:
        """Roles stored with exactly this company id (``None`` means IS NULL)."""
        ...

    @abstractmethod
    async def find_visible_to_company(self, company_id: UUID) -> List[Role]:
        """Roles whose company id is NULL or equal to ``company_id``."""
        ...

    @abstractmethod
    async def update(self, role: Role) -> Role:
        ...

    @abstractmethod
    async def delete(self, role_id: UUID) -> Role:
        ...


@runtime_checkable
class PermissionRepository(Protocol):
    """Protocol for permission data access operations."""

    @abstractmethod
    async def create(self, permission: Permission) -> Permission:
        ...

    @abstractmethod
    async def find_by_id(self, permission_id: UUID) -> Optional[Permission]:
        ...

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[Permission]:
        ...

    @abstractmethod
    async def find_by_ids(self, permission_ids: List[UUID]) -> List[Permission]:
        ...

    @abstractmethod
    async def find_all(self) -> List[Permission]:
        ...

    @abstractmethod
    async def delete(self, permission_id: UUID) -> Permission:
        ...


@runtime_checkable
class RolePermissionRepository(Protocol):
    """Protocol for role/permission grant persistence."""

    @abstractmethod
    async def create(self, grant: RolePermission) -> RolePermission:
        ...

    @abstractmethod
    async def find(self, role_id: UUID, permission_id: UUID) -> Optional[RolePermission]:
        ...

    @abstractmethod
    async def find_by_role_id(self, role_id: UUID) -> List[RolePermission]:
        ...

    @abstractmethod
    async def delete(self, role_id: UUID, permission_id: UUID) -> bool:
        ...


@runtime_checkable
class PermissionCache(Protocol):
    """Protocol for caching the permission names granted to a role.

    Each role carries a version that :meth:`invalidate_role` advances.
    :meth:`set_role_permissions` only stores names read under the current
    version, so a resolve that overlaps an invalidation is never cached.
    """

    @abstractmethod
    async def get_role_permissions(self, role_id: UUID) -> Optional[List[str]]:
        ...

    @abstractmethod
    async def get_role_version(self, role_id: UUID) -> Optional[int]:
        """Current version, or None when it cannot be read."""
        ...

    @abstractmethod
    async def set_role_permissions(self, role_id: UUID, names: List[str], version: int) -> bool:
        """Store ``names`` if the role is still at ``version``; True if stored."""
        ...

    @abstractmethod
    async def invalidate_role(self, role_id: UUID) -> None:
        ...
