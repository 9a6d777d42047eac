"""AsyncPG-based permission and role-permission repositories."""

from typing import List, Optional
from uuid import UUID
import logging

import asyncpg

from ....config.constants import Tables
from ....core.exceptions import DatabaseError, RecordNotFoundError, UniqueConstraintViolationError
from ....database.connection import DatabaseManager
from ....database.utils import build_optional, rows_affected
from ..entities import Permission, RolePermission


logger = logging.getLogger(__name__)

PERMISSION_COLUMNS = "id, name, description, created_at, updated_at"
GRANT_COLUMNS = "id, role_id, permission_id, created_at"


class AsyncPGPermissionRepository:
    """AsyncPG implementation of PermissionRepository protocol."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._table = f"{schema}.{Tables.PERMISSIONS}"

    @staticmethod
    def _build_permission_from_row(row) -> Permission:
        return Permission(
            id=row['id'],
            name=row['name'],
            description=row['description'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    async def create(self, permission: Permission) -> Permission:
        query = f"""
            INSERT INTO {self._table} (name, description, created_at, updated_at)
            VALUES ($1, $2, NOW(), NOW())
            RETURNING {PERMISSION_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, permission.name, permission.description)
            return self._build_permission_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to create permission {permission.name}: {e}")
            raise DatabaseError(f"Failed to create permission: {e}")

    async def find_by_id(self, permission_id: UUID) -> Optional[Permission]:
        query = f"SELECT {PERMISSION_COLUMNS} FROM {self._table} WHERE id = $1"
        try:
            row = await self._db.fetchrow(query, permission_id)
            return build_optional(row, self._build_permission_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get permission {permission_id}: {e}")
            raise DatabaseError(f"Failed to retrieve permission: {e}")

    async def find_by_name(self, name: str) -> Optional[Permission]:
        query = f"SELECT {PERMISSION_COLUMNS} FROM {self._table} WHERE name = $1"
        try:
            row = await self._db.fetchrow(query, name)
            return build_optional(row, self._build_permission_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get permission by name {name}: {e}")
            raise DatabaseError(f"Failed to retrieve permission: {e}")

    async def find_by_ids(self, permission_ids: List[UUID]) -> List[Permission]:
        if not permission_ids:
            return []
        query = f"SELECT {PERMISSION_COLUMNS} FROM {self._table} WHERE id = ANY($1) ORDER BY name"
        try:
            rows = await self._db.fetch(query, list(permission_ids))
            return [self._build_permission_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get permissions by ids: {e}")
            raise DatabaseError(f"Failed to retrieve permissions: {e}")

    async def find_all(self) -> List[Permission]:
        query = f"SELECT {PERMISSION_COLUMNS} FROM {self._table} ORDER BY name"
        try:
            rows = await self._db.fetch(query)
            return [self._build_permission_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to list permissions: {e}")
            raise DatabaseError(f"Failed to list permissions: {e}")

    async def delete(self, permission_id: UUID) -> Permission:
        query = f"DELETE FROM {self._table} WHERE id = $1 RETURNING {PERMISSION_COLUMNS}"
        try:
            row = await self._db.fetchrow(query, permission_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to delete permission {permission_id}: {e}")
            raise DatabaseError(f"Failed to delete permission: {e}")
        if not row:
            raise RecordNotFoundError(self._table, permission_id)
        return self._build_permission_from_row(row)


class AsyncPGRolePermissionRepository:
    """AsyncPG implementation of RolePermissionRepository protocol."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._table = f"{schema}.{Tables.ROLE_PERMISSIONS}"

    @staticmethod
    def _build_grant_from_row(row) -> RolePermission:
        return RolePermission(
            id=row['id'],
            role_id=row['role_id'],
            permission_id=row['permission_id'],
            created_at=row['created_at'],
        )

    async def create(self, grant: RolePermission) -> RolePermission:
        query = f"""
            INSERT INTO {self._table} (role_id, permission_id, created_at)
            VALUES ($1, $2, NOW())
            RETURNING {GRANT_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, grant.role_id, grant.permission_id)
            return self._build_grant_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to grant permission {grant.permission_id} to role {grant.role_id}: {e}")
            raise DatabaseError(f"Failed to add permission to role: {e}")

    async def find(self, role_id: UUID, permission_id: UUID) -> Optional[RolePermission]:
        query = f"SELECT {GRANT_COLUMNS} FROM {self._table} WHERE role_id = $1 AND permission_id = $2"
        try:
            row = await self._db.fetchrow(query, role_id, permission_id)
            return build_optional(row, self._build_grant_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get grant of {permission_id} to role {role_id}: {e}")
            raise DatabaseError(f"Failed to retrieve role permission: {e}")

    async def find_by_role_id(self, role_id: UUID) -> List[RolePermission]:
        query = f"SELECT {GRANT_COLUMNS} FROM {self._table} WHERE role_id = $1 ORDER BY created_at"
        try:
            rows = await self._db.fetch(query, role_id)
            return [self._build_grant_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to list grants for role {role_id}: {e}")
            raise DatabaseError(f"Failed to list role permissions: {e}")

    async def delete(self, role_id: UUID, permission_id: UUID) -> bool:
        query = f"DELETE FROM {self._table} WHERE role_id = $1 AND permission_id = $2"
        try:
            result = await self._db.execute(query, role_id, permission_id)
            return rows_affected(result) == 1
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to remove permission {permission_id} from role {role_id}: {e}")
            raise DatabaseError(f"Failed to remove permission from role: {e}")
