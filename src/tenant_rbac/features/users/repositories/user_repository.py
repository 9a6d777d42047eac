"""AsyncPG-based user repository (read side only)."""

from typing import Optional
from uuid import UUID
import logging

import asyncpg

from ....config.constants import Tables
from ....core.exceptions import DatabaseError
from ....database.connection import DatabaseManager
from ....database.utils import build_optional
from ..entities import User


logger = logging.getLogger(__name__)

USER_COLUMNS = (
    "id, email, first_name, last_name, is_active, last_login_at, last_login_ip, created_at, updated_at"
)


class AsyncPGUserRepository:
    """AsyncPG implementation of UserRepository protocol."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._table = f"{schema}.{Tables.USERS}"

    @staticmethod
    def _build_user_from_row(row) -> User:
        return User(
            id=row['id'],
            email=row['email'],
            first_name=row['first_name'],
            last_name=row['last_name'],
            is_active=row['is_active'],
            last_login_at=row['last_login_at'],
            last_login_ip=row['last_login_ip'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        query = f"SELECT {USER_COLUMNS} FROM {self._table} WHERE id = $1"
        try:
            row = await self._db.fetchrow(query, user_id)
            return build_optional(row, self._build_user_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get user {user_id}: {e}")
            raise DatabaseError(f"Failed to retrieve user: {e}")

    async def find_by_email(self, email: str) -> Optional[User]:
        query = f"SELECT {USER_COLUMNS} FROM {self._table} WHERE email = $1"
        try:
            row = await self._db.fetchrow(query, email.strip().lower())
            return build_optional(row, self._build_user_from_row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get user by email: {e}")
            raise DatabaseError(f"Failed to retrieve user: {e}")
