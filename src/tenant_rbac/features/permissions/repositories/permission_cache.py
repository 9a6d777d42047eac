"""Redis-backed cache of the permission names granted to each role.

Read failures degrade to a miss and the resolver falls back to the store.
Entries expire after a TTL so a failed invalidation is bounded in time.

Every role has a version counter next to its entry. Invalidation bumps the
counter and drops the entry in one transaction; writes WATCH the counter and
are discarded if it moved since the caller read it.
"""

import json
import logging
from typing import List, Optional
from uuid import UUID

from redis.asyncio import Redis
from redis.exceptions import RedisError, WatchError

from ....config.constants import CacheKeys, CacheTTL
from ....config.settings import RbacSettings
from ....core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class RedisPermissionCache:
    """Redis implementation of PermissionCache protocol."""

    def __init__(self, redis_client: Redis, ttl: int = CacheTTL.ROLE_PERMISSIONS):
        self._redis = redis_client
        self._ttl = ttl

    @classmethod
    def from_url(cls, redis_url: str, ttl: int = CacheTTL.ROLE_PERMISSIONS) -> "RedisPermissionCache":
        return cls(Redis.from_url(redis_url, decode_responses=True), ttl=ttl)

    @classmethod
    def from_settings(cls, settings: RbacSettings) -> "RedisPermissionCache":
        if not settings.redis_url:
            raise ConfigurationError("redis_url is not configured")
        return cls.from_url(settings.redis_url, ttl=settings.cache_ttl_permissions)

    @staticmethod
    def _key(role_id: UUID) -> str:
        return CacheKeys.ROLE_PERMISSIONS.format(role_id=role_id)

    @staticmethod
    def _version_key(role_id: UUID) -> str:
        return CacheKeys.ROLE_PERMISSIONS_VERSION.format(role_id=role_id)

    async def get_role_permissions(self, role_id: UUID) -> Optional[List[str]]:
        try:
            raw = await self._redis.get(self._key(role_id))
        except RedisError as e:
            logger.warning(f"Permission cache read failed for role {role_id}: {e}")
            return None
        if raw is None:
            return None
        try:
            names = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Discarding malformed permission cache entry for role {role_id}")
            return None
        return names if isinstance(names, list) else None

    async def get_role_version(self, role_id: UUID) -> Optional[int]:
        try:
            raw = await self._redis.get(self._version_key(role_id))
            return int(raw) if raw is not None else 0
        except RedisError as e:
            logger.warning(f"Permission cache version read failed for role {role_id}: {e}")
        except (TypeError, ValueError):
            logger.warning(f"Malformed permission cache version for role {role_id}")
        return None

    async def set_role_permissions(self, role_id: UUID, names: List[str], version: int) -> bool:
        version_key = self._version_key(role_id)
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                await pipe.watch(version_key)
                current = await pipe.get(version_key)
                if int(current or 0) != version:
                    logger.debug(f"Skipping permission cache write for role {role_id}: version moved")
                    return False
                pipe.multi()
                pipe.set(self._key(role_id), json.dumps(names), ex=self._ttl or None)
                await pipe.execute()
                return True
        except WatchError:
            logger.debug(f"Skipping permission cache write for role {role_id}: invalidated during write")
        except RedisError as e:
            logger.warning(f"Permission cache write failed for role {role_id}: {e}")
        except (TypeError, ValueError):
            logger.warning(f"Malformed permission cache version for role {role_id}")
        return False

    async def invalidate_role(self, role_id: UUID) -> None:
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.incr(self._version_key(role_id))
                pipe.delete(self._key(role_id))
                await pipe.execute()
        except RedisError as e:
            logger.warning(f"Permission cache invalidation failed for role {role_id}: {e}")
