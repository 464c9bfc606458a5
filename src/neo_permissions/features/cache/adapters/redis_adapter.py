"""Redis cache backend adapter for neo-permissions."""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ....core.exceptions import CacheBackendError

logger = logging.getLogger(__name__)


class RedisCacheBackend:
    """
    Redis implementation of the cache backend.

    Features:
    - Key prefixing so several services can share one Redis database
    - JSON serialization of cached values
    - TTL handled by Redis itself
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "neo_permissions"):
        self._redis = redis_client
        self._key_prefix = key_prefix

    def _full_key(self, key: str) -> str:
        return f"{self._key_prefix}:{key}" if self._key_prefix else key

    async def has(self, key: str) -> bool:
        try:
            return bool(await self._redis.exists(self._full_key(key)))
        except RedisError as e:
            raise CacheBackendError(f"Redis exists error for key {key}: {e}") from e

    async def get(self, key: str) -> Optional[Any]:
        try:
            result = await self._redis.get(self._full_key(key))
        except RedisError as e:
            raise CacheBackendError(f"Redis get error for key {key}: {e}") from e

        if result is None:
            return None
        if isinstance(result, bytes):
            result = result.decode()
        try:
            return json.loads(result)
        except ValueError as e:
            raise CacheBackendError(f"Cached value for key {key} is not valid JSON: {e}") from e

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        try:
            data = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheBackendError(f"Value for key {key} is not JSON serializable: {e}") from e

        try:
            await self._redis.set(self._full_key(key), data, ex=ttl if ttl and ttl > 0 else None)
        except RedisError as e:
            raise CacheBackendError(f"Redis set error for key {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            deleted = await self._redis.delete(self._full_key(key))
        except RedisError as e:
            raise CacheBackendError(f"Redis delete error for key {key}: {e}") from e
        return deleted > 0
