"""AsyncPG-based role repository implementation.

Expects a ``roles`` table with ``UNIQUE NULLS NOT DISTINCT (name, company_id)``
so that system-scoped rows (company_id IS NULL) form their own scope.
"""

from typing import List, Optional
from uuid import UUID
import logging

import asyncpg

from ....config.constants import Tables
from ....core.exceptions import DatabaseError, RecordNotFoundError, UniqueConstraintViolationError
from ....database.connection import DatabaseManager
from ....database.utils import build_optional
from ..entities import Role


logger = logging.getLogger(__name__)

ROLE_COLUMNS = "id, name, description, company_id, created_at, updated_at"


class AsyncPGRoleRepository:
    """AsyncPG implementation of RoleRepository protocol."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._table = f"{schema}.{Tables.ROLES}"

    @staticmethod
    def _build_role_from_row(row) -> Role:
        return Role(
            id=row['id'],
            name=row['name'],
            description=row['description'],
            company_id=row['company_id'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    async def create(self, role: Role) -> Role:
        query = f"""
            INSERT INTO {self._table} (name, description, company_id, created_at, updated_at)
            VALUES ($1, $2, $3, NOW(), NOW())
            RETURNING {ROLE_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, role.name, role.description, role.company_id)
            return self._build_role_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to create role {role.name}: {e}")
            raise DatabaseError(f"Failed to create role: {e}")

    async def find_by_id(self, role_id: UUID) -> Optional[Role]:
        query = f"SELECT {ROLE_COLUMNS} FROM {self._table} WHERE id = $1"
        try:
            row = await self._db.fetchrow(query, role_id)
            return build_optional(row, self._build_role_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get role by id {role_id}: {e}")
            raise DatabaseError(f"Failed to retrieve role: {e}")

    async def find_by_name(self, name: str, company_id: Optional[UUID]) -> Optional[Role]:
        query = f"""
            SELECT {ROLE_COLUMNS} FROM {self._table}
            WHERE name = $1 AND company_id IS NOT DISTINCT FROM $2::uuid
        """
        try:
            row = await self._db.fetchrow(query, name, company_id)
            return build_optional(row, self._build_role_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get role {name} for company {company_id}: {e}")
            raise DatabaseError(f"Failed to retrieve role: {e}")

    async def find_by_company(self, company_id: Optional[UUID]) -> List[Role]:
        query = f"""
            SELECT {ROLE_COLUMNS} FROM {self._table}
            WHERE company_id IS NOT DISTINCT FROM $1::uuid
            ORDER BY created_at
        """
        try:
            rows = await self._db.fetch(query, company_id)
            return [self._build_role_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to list roles for company {company_id}: {e}")
            raise DatabaseError(f"Failed to list roles: {e}")

    async def find_visible_to_company(self, company_id: UUID) -> List[Role]:
        query = f"""
            SELECT {ROLE_COLUMNS} FROM {self._table}
            WHERE company_id IS NULL OR company_id = $1
            ORDER BY created_at
        """
        try:
            rows = await self._db.fetch(query, company_id)
            return [self._build_role_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to list roles visible to company {company_id}: {e}")
            raise DatabaseError(f"Failed to list roles: {e}")

    async def update(self, role: Role) -> Role:
        if not role.id:
            raise DatabaseError("Cannot update role without ID")

        query = f"""
            UPDATE {self._table}
            SET name = $2, description = $3, updated_at = NOW()
            WHERE id = $1
            RETURNING {ROLE_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, role.id, role.name, role.description)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to update role {role.id}: {e}")
            raise DatabaseError(f"Failed to update role: {e}")
        if not row:
            raise RecordNotFoundError(self._table, role.id)
        return self._build_role_from_row(row)

    async def delete(self, role_id: UUID) -> Role:
        query = f"DELETE FROM {self._table} WHERE id = $1 RETURNING {ROLE_COLUMNS}"
        try:
            row = await self._db.fetchrow(query, role_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to delete role {role_id}: {e}")
            raise DatabaseError(f"Failed to delete role: {e}")
        if not row:
            raise RecordNotFoundError(self._table, role_id)
        return self._build_role_from_row(row)
