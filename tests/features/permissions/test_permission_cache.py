"""Tests for the Redis permission cache."""

import json
import pytest
from uuid import uuid4
from unittest.mock import AsyncMock, MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import WatchError

from tenant_rbac.config.settings import RbacSettings
from tenant_rbac.core.exceptions import ConfigurationError
from tenant_rbac.features.permissions import RedisPermissionCache


@pytest.fixture
def pipeline():
    pipe = MagicMock()
    pipe.__aenter__.return_value = pipe
    pipe.__aexit__.return_value = False
    pipe.watch = AsyncMock()
    pipe.get = AsyncMock(return_value=None)
    pipe.execute = AsyncMock(return_value=[True])
    return pipe


@pytest.fixture
def redis_client(pipeline):
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.pipeline = MagicMock(return_value=pipeline)
    return client


@pytest.fixture
def cache(redis_client):
    return RedisPermissionCache(redis_client, ttl=60)


class TestRedisPermissionCache:
    """Cache reads, writes and failure handling."""

    @pytest.mark.asyncio
    async def test_miss(self, cache):
        assert await cache.get_role_permissions(uuid4()) is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, cache, redis_client, pipeline):
        role_id = uuid4()

        assert await cache.set_role_permissions(role_id, ["users:read"], 0) is True

        pipeline.watch.assert_awaited_once_with(f"rbac:role:permissions:version:{role_id}")
        pipeline.multi.assert_called_once()
        key, payload = pipeline.set.call_args[0]
        assert key == f"rbac:role:permissions:{role_id}"
        assert pipeline.set.call_args[1]["ex"] == 60
        pipeline.execute.assert_awaited_once()

        redis_client.get.return_value = payload
        assert await cache.get_role_permissions(role_id) == ["users:read"]

    @pytest.mark.asyncio
    async def test_malformed_entry_is_a_miss(self, cache, redis_client):
        redis_client.get.return_value = "not json"

        assert await cache.get_role_permissions(uuid4()) is None

    @pytest.mark.asyncio
    async def test_non_list_entry_is_a_miss(self, cache, redis_client):
        redis_client.get.return_value = json.dumps({"users:read": True})

        assert await cache.get_role_permissions(uuid4()) is None

    @pytest.mark.asyncio
    async def test_read_failure_is_a_miss(self, cache, redis_client):
        redis_client.get.side_effect = RedisConnectionError("down")

        assert await cache.get_role_permissions(uuid4()) is None

    @pytest.mark.asyncio
    async def test_invalidate_bumps_version_and_drops_entry(self, cache, pipeline):
        role_id = uuid4()

        await cache.invalidate_role(role_id)

        pipeline.incr.assert_called_once_with(f"rbac:role:permissions:version:{role_id}")
        pipeline.delete.assert_called_once_with(f"rbac:role:permissions:{role_id}")
        pipeline.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_write_failures_are_logged_not_raised(self, cache, pipeline):
        pipeline.execute.side_effect = RedisConnectionError("down")

        assert await cache.set_role_permissions(uuid4(), ["users:read"], 0) is False
        await cache.invalidate_role(uuid4())


class TestCacheVersions:
    """Writes are discarded once the role has been invalidated."""

    @pytest.mark.asyncio
    async def test_version_defaults_to_zero(self, cache, redis_client):
        assert await cache.get_role_version(uuid4()) == 0

    @pytest.mark.asyncio
    async def test_version_is_read_from_counter(self, cache, redis_client):
        role_id = uuid4()
        redis_client.get.return_value = "3"

        assert await cache.get_role_version(role_id) == 3
        redis_client.get.assert_awaited_once_with(f"rbac:role:permissions:version:{role_id}")

    @pytest.mark.asyncio
    async def test_unreadable_version(self, cache, redis_client):
        redis_client.get.side_effect = RedisConnectionError("down")

        assert await cache.get_role_version(uuid4()) is None

    @pytest.mark.asyncio
    async def test_stale_version_is_not_written(self, cache, pipeline):
        pipeline.get.return_value = "4"

        assert await cache.set_role_permissions(uuid4(), ["users:delete"], 3) is False
        pipeline.set.assert_not_called()
        pipeline.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalidation_during_write_discards_it(self, cache, pipeline):
        pipeline.get.return_value = "3"
        pipeline.execute.side_effect = WatchError("version changed")

        assert await cache.set_role_permissions(uuid4(), ["users:delete"], 3) is False


class TestCacheFromSettings:
    """Construction from RbacSettings."""

    def test_requires_redis_url(self):
        with pytest.raises(ConfigurationError):
            RedisPermissionCache.from_settings(RbacSettings(_env_file=None, redis_url=None))

    def test_uses_configured_ttl(self, mocker):
        from_url = mocker.patch("redis.asyncio.Redis.from_url")
        settings = RbacSettings(_env_file=None, redis_url="redis://localhost:6379/0", cache_ttl_permissions=30)

        cache = RedisPermissionCache.from_settings(settings)

        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)
        assert cache._ttl == 30
