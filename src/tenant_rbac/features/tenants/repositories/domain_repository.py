"""AsyncPG-based repositories for domains and company/domain links."""

from typing import List, Optional
from uuid import UUID
import logging

import asyncpg

from ....config.constants import Tables
from ....core.exceptions import DatabaseError, RecordNotFoundError, UniqueConstraintViolationError
from ....database.connection import DatabaseManager
from ....database.utils import build_optional, rows_affected
from ..entities import CompanyDomain, Domain, normalize_domain_name


logger = logging.getLogger(__name__)

DOMAIN_COLUMNS = "id, name, is_active, created_at, updated_at"
LINK_COLUMNS = "id, company_id, domain_id, created_at"


class AsyncPGDomainRepository:
    """AsyncPG implementation of DomainRepository protocol."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._table = f"{schema}.{Tables.DOMAINS}"

    @staticmethod
    def _build_domain_from_row(row) -> Domain:
        return Domain(
            id=row['id'],
            name=row['name'],
            is_active=row['is_active'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    async def create(self, domain: Domain) -> Domain:
        query = f"""
            INSERT INTO {self._table} (name, is_active, created_at, updated_at)
            VALUES ($1, $2, NOW(), NOW())
            RETURNING {DOMAIN_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, domain.name, domain.is_active)
            return self._build_domain_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to create domain {domain.name}: {e}")
            raise DatabaseError(f"Failed to create domain: {e}")

    async def find_by_id(self, domain_id: UUID) -> Optional[Domain]:
        query = f"SELECT {DOMAIN_COLUMNS} FROM {self._table} WHERE id = $1"
        try:
            row = await self._db.fetchrow(query, domain_id)
            return build_optional(row, self._build_domain_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get domain {domain_id}: {e}")
            raise DatabaseError(f"Failed to retrieve domain: {e}")

    async def find_by_name(self, name: str) -> Optional[Domain]:
        query = f"SELECT {DOMAIN_COLUMNS} FROM {self._table} WHERE name = $1"
        try:
            row = await self._db.fetchrow(query, normalize_domain_name(name))
            return build_optional(row, self._build_domain_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get domain by name {name}: {e}")
            raise DatabaseError(f"Failed to retrieve domain: {e}")

    async def update(self, domain: Domain) -> Domain:
        query = f"""
            UPDATE {self._table}
            SET name = $2, is_active = $3, updated_at = NOW()
            WHERE id = $1
            RETURNING {DOMAIN_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, domain.id, domain.name, domain.is_active)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to update domain {domain.id}: {e}")
            raise DatabaseError(f"Failed to update domain: {e}")
        if not row:
            raise RecordNotFoundError(self._table, domain.id)
        return self._build_domain_from_row(row)

    async def delete(self, domain_id: UUID) -> Domain:
        query = f"DELETE FROM {self._table} WHERE id = $1 RETURNING {DOMAIN_COLUMNS}"
        try:
            row = await self._db.fetchrow(query, domain_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to delete domain {domain_id}: {e}")
            raise DatabaseError(f"Failed to delete domain: {e}")
        if not row:
            raise RecordNotFoundError(self._table, domain_id)
        return self._build_domain_from_row(row)


class AsyncPGCompanyDomainRepository:
    """AsyncPG implementation of CompanyDomainRepository protocol."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._table = f"{schema}.{Tables.COMPANY_DOMAINS}"

    @staticmethod
    def _build_link_from_row(row) -> CompanyDomain:
        return CompanyDomain(
            id=row['id'],
            company_id=row['company_id'],
            domain_id=row['domain_id'],
            created_at=row['created_at'],
        )

    async def create(self, link: CompanyDomain) -> CompanyDomain:
        query = f"""
            INSERT INTO {self._table} (company_id, domain_id, created_at)
            VALUES ($1, $2, NOW())
            RETURNING {LINK_COLUMNS}
        """
        try:
            row = await self._db.fetchrow(query, link.company_id, link.domain_id)
            return self._build_link_from_row(row)
        except asyncpg.UniqueViolationError as e:
            raise UniqueConstraintViolationError(self._table, e.constraint_name)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to link domain {link.domain_id} to company {link.company_id}: {e}")
            raise DatabaseError(f"Failed to create company domain: {e}")

    async def find_by_domain_id(self, domain_id: UUID) -> List[CompanyDomain]:
        query = f"SELECT {LINK_COLUMNS} FROM {self._table} WHERE domain_id = $1 ORDER BY created_at"
        try:
            rows = await self._db.fetch(query, domain_id)
            return [self._build_link_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get company links for domain {domain_id}: {e}")
            raise DatabaseError(f"Failed to retrieve company domains: {e}")

    async def find_by_company_id(self, company_id: UUID) -> List[CompanyDomain]:
        query = f"SELECT {LINK_COLUMNS} FROM {self._table} WHERE company_id = $1 ORDER BY created_at"
        try:
            rows = await self._db.fetch(query, company_id)
            return [self._build_link_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get domain links for company {company_id}: {e}")
            raise DatabaseError(f"Failed to retrieve company domains: {e}")

    async def delete(self, company_id: UUID, domain_id: UUID) -> bool:
        query = f"DELETE FROM {self._table} WHERE company_id = $1 AND domain_id = $2"
        try:
            result = await self._db.execute(query, company_id, domain_id)
            return rows_affected(result) == 1
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to unlink domain {domain_id} from company {company_id}: {e}")
            raise DatabaseError(f"Failed to delete company domain: {e}")
