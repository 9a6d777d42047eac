"""AsyncPG-based membership (user role) repository.

Expects a ``user_roles`` table with ``UNIQUE (user_id, company_id)``.
"""

from typing import List, Optional
from uuid import UUID
import logging

import asyncpg

from ....config.constants import Tables
from ....core.exceptions import DatabaseError, RecordNotFoundError, UniqueConstraintViolationError
from ....database.connection import DatabaseManager
from ....database.utils import build_optional
from ..entities import Membership


logger = logging.getLogger(__name__)

MEMBERSHIP_COLUMNS = "id, user_id, company_id, role_id, created_at, updated_at"


class AsyncPGMembershipRepository:
    """AsyncPG implementation of MembershipRepository protocol."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._table = f"{schema}.{Tables.USER_ROLES}"

    @staticmethod
    def _build_membership_from_row(row) -> Membership:
        return Membership(
            id=row['id'],
            user_id=row['user_id'],
            company_id=row['company_id'],
            role_id=row['role_id'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    async def _fetch_many(self, where: str, *args) -> List[Membership]:
        query = f"SELECT {MEMBERSHIP_COLUMNS} FROM {self._table} WHERE {where} ORDER BY created_at"
        try:
            rows = await self._db.fetch(query, *args)
            return [self._build_membership_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to list memberships ({where}): {e}")
            raise DatabaseError(f"Failed to list memberships: {e}")

    async def create(self, membership: Membership) -> Membership:
        query = f"""
            INSERT INTO {self._table} (user_id, company_id, role_id, created_at, updated_at)
            VALUES ($1, $2, $3, NOW(), NOW())
            RETURNING {MEMBERSHIP_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, membership.user_id, membership.company_id, membership.role_id)
            return self._build_membership_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to create membership for user {membership.user_id}: {e}")
            raise DatabaseError(f"Failed to create membership: {e}")

    async def find_by_user_id(self, user_id: UUID) -> List[Membership]:
        return await self._fetch_many("user_id = $1", user_id)

    async def find_by_company_id(self, company_id: UUID) -> List[Membership]:
        return await self._fetch_many("company_id = $1", company_id)

    async def find_by_role_id(self, role_id: UUID) -> List[Membership]:
        return await self._fetch_many("role_id = $1", role_id)

    async def find_by_user_and_company(self, user_id: UUID, company_id: UUID) -> Optional[Membership]:
        query = f"SELECT {MEMBERSHIP_COLUMNS} FROM {self._table} WHERE user_id = $1 AND company_id = $2"
        try:
            row = await self._db.fetchrow(query, user_id, company_id)
            return build_optional(row, self._build_membership_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get membership of user {user_id} in company {company_id}: {e}")
            raise DatabaseError(f"Failed to retrieve membership: {e}")

    async def exists_for_role_in_company(self, role_id: UUID, company_id: UUID) -> bool:
        query = f"SELECT EXISTS(SELECT 1 FROM {self._table} WHERE role_id = $1 AND company_id = $2)"
        try:
            return bool(await self._db.fetchval(query, role_id, company_id))
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to check role {role_id} assignments in company {company_id}: {e}")
            raise DatabaseError(f"Failed to check membership: {e}")

    async def update_role(self, membership_id: UUID, role_id: UUID) -> Membership:
        query = f"""
            UPDATE {self._table}
            SET role_id = $2, updated_at = NOW()
            WHERE id = $1
            RETURNING {MEMBERSHIP_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, membership_id, role_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to reassign membership {membership_id}: {e}")
            raise DatabaseError(f"Failed to update membership: {e}")
        if not row:
            raise RecordNotFoundError(self._table, membership_id)
        return self._build_membership_from_row(row)

    async def delete(self, membership_id: UUID) -> Membership:
        query = f"DELETE FROM {self._table} WHERE id = $1 RETURNING {MEMBERSHIP_COLUMNS}"
        try:
            row = await self._db.fetchrow(query, membership_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to delete membership {membership_id}: {e}")
            raise DatabaseError(f"Failed to delete membership: {e}")
        if not row:
            raise RecordNotFoundError(self._table, membership_id)
        return self._build_membership_from_row(row)
