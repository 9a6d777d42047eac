"""AsyncPG-based company repository implementation."""

from typing import List, Optional
from uuid import UUID
import logging

import asyncpg

from ....config.constants import Tables
from ....core.exceptions import DatabaseError, RecordNotFoundError, UniqueConstraintViolationError
from ....database.connection import DatabaseManager
from ....database.utils import build_optional
from ..entities import Company


logger = logging.getLogger(__name__)

COMPANY_COLUMNS = "id, name, description, is_active, created_at, updated_at"


class AsyncPGCompanyRepository:
    """AsyncPG implementation of CompanyRepository protocol."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._table = f"{schema}.{Tables.COMPANIES}"

    @staticmethod
    def _build_company_from_row(row) -> Company:
        return Company(
            id=row['id'],
            name=row['name'],
            description=row['description'],
            is_active=row['is_active'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    async def create(self, company: Company) -> Company:
        query = f"""
            INSERT INTO {self._table} (name, description, is_active, created_at, updated_at)
            VALUES ($1, $2, $3, NOW(), NOW())
            RETURNING {COMPANY_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, company.name, company.description, company.is_active)
            return self._build_company_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to create company {company.name}: {e}")
            raise DatabaseError(f"Failed to create company: {e}")

    async def find_by_id(self, company_id: UUID) -> Optional[Company]:
        query = f"SELECT {COMPANY_COLUMNS} FROM {self._table} WHERE id = $1"
        try:
            row = await self._db.fetchrow(query, company_id)
            return build_optional(row, self._build_company_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get company {company_id}: {e}")
            raise DatabaseError(f"Failed to retrieve company: {e}")

    async def find_by_name(self, name: str) -> Optional[Company]:
        query = f"SELECT {COMPANY_COLUMNS} FROM {self._table} WHERE name = $1"
        try:
            row = await self._db.fetchrow(query, name)
            return build_optional(row, self._build_company_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get company by name {name}: {e}")
            raise DatabaseError(f"Failed to retrieve company: {e}")

    async def find_all(self) -> List[Company]:
        query = f"SELECT {COMPANY_COLUMNS} FROM {self._table} ORDER BY created_at"
        try:
            rows = await self._db.fetch(query)
            return [self._build_company_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to list companies: {e}")
            raise DatabaseError(f"Failed to list companies: {e}")

    async def find_by_ids(self, company_ids: List[UUID]) -> List[Company]:
        if not company_ids:
            return []
        query = f"SELECT {COMPANY_COLUMNS} FROM {self._table} WHERE id = ANY($1) ORDER BY created_at"
        try:
            rows = await self._db.fetch(query, list(company_ids))
            return [self._build_company_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get companies by ids: {e}")
            raise DatabaseError(f"Failed to retrieve companies: {e}")

    async def update(self, company: Company) -> Company:
        query = f"""
            UPDATE {self._table}
            SET name = $2, description = $3, is_active = $4, updated_at = NOW()
            WHERE id = $1
            RETURNING {COMPANY_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, company.id, company.name, company.description, company.is_active)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to update company {company.id}: {e}")
            raise DatabaseError(f"Failed to update company: {e}")
        if not row:
            raise RecordNotFoundError(self._table, company.id)
        return self._build_company_from_row(row)

    async def delete(self, company_id: UUID) -> Company:
        query = f"DELETE FROM {self._table} WHERE id = $1 RETURNING {COMPANY_COLUMNS}"
        try:
            row = await self._db.fetchrow(query, company_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to delete company {company_id}: {e}")
            raise DatabaseError(f"Failed to delete company: {e}")
        if not row:
            raise RecordNotFoundError(self._table, company_id)
        return self._build_company_from_row(row)
