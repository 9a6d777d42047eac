"""Tests for the asyncpg database manager."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from tenant_rbac.config.settings import RbacSettings
from tenant_rbac.database import DatabaseManager, rows_affected


@pytest.fixture
def settings():
    return RbacSettings(
        _env_file=None,
        database_url="postgresql+asyncpg://rbac@localhost/rbac",
        db_pool_min_size=2,
        db_pool_max_size=4,
    )


@pytest.fixture
def connection():
    conn = AsyncMock()
    conn.fetchval.return_value = 1
    return conn


@pytest.fixture
def pool(connection):
    mock_pool = MagicMock()
    mock_pool.acquire.return_value.__aenter__.return_value = connection
    mock_pool.close = AsyncMock()
    return mock_pool


class TestDatabaseManager:
    """Pool lifecycle and query delegation."""

    def test_pool_config_from_settings(self, settings):
        manager = DatabaseManager(settings=settings, max_inactive_connection_lifetime=60)

        assert manager.dsn == "postgresql://rbac@localhost/rbac"
        assert manager.pool_config["min_size"] == 2
        assert manager.pool_config["max_size"] == 4
        assert manager.pool_config["max_inactive_connection_lifetime"] == 60

    @pytest.mark.asyncio
    async def test_pool_is_created_once(self, settings, pool, mocker):
        manager = DatabaseManager(settings=settings)
        create_pool = mocker.patch("asyncpg.create_pool", AsyncMock(return_value=pool))

        await manager.create_pool()
        await manager.create_pool()

        create_pool.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fetchrow_uses_pooled_connection(self, settings, pool, connection):
        manager = DatabaseManager(settings=settings)
        manager.pool = pool
        connection.fetchrow.return_value = {"id": 1}

        row = await manager.fetchrow("SELECT 1 AS id")

        assert row == {"id": 1}
        connection.fetchrow.assert_awaited_once_with("SELECT 1 AS id", timeout=None)

    @pytest.mark.asyncio
    async def test_transaction_wraps_connection(self, settings, pool, connection):
        manager = DatabaseManager(settings=settings)
        manager.pool = pool
        connection.transaction = MagicMock()

        async with manager.transaction() as conn:
            assert conn is connection

        connection.transaction.return_value.__aenter__.assert_awaited_once()
        connection.transaction.return_value.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_health_check(self, settings, pool, connection):
        manager = DatabaseManager(settings=settings)
        manager.pool = pool

        assert await manager.health_check() is True

        connection.fetchval.side_effect = OSError("connection refused")
        assert await manager.health_check() is False

    @pytest.mark.asyncio
    async def test_close_pool(self, settings, pool):
        manager = DatabaseManager(settings=settings)
        manager.pool = pool

        await manager.close_pool()

        pool.close.assert_awaited_once()
        assert manager.pool is None


@pytest.mark.parametrize("status, expected", [
    ("DELETE 1", 1),
    ("UPDATE 3", 3),
    ("INSERT 0 1", 1),
    ("", 0),
    (None, 0),
])
def test_rows_affected(status, expected):
    assert rows_affected(status) == expected
