# 📄 File: substore/shared/infrastructure/storage/redis_store.py

# 🧭 Purpose (Layman Explanation):
# Saves the subscription into a Redis server so it survives restarts
# and can be shared by more than one process.

# 🧪 Purpose (Technical Summary):
# KeyValueStore implementation over a binary-safe redis.asyncio client with an
# optional key namespace. Every Redis failure is surfaced as a retryable StorageIOError.

# 🔗 Dependencies:
# - redis (redis.asyncio client and exceptions)
# - substore.shared.config.redis (client construction)

# 🔄 Connected Modules / Calls From:
# Created by: substore.shared.infrastructure.storage.create_key_value_store
# Used by: subscription store when STORAGE_BACKEND=redis

from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from substore.shared.config.redis import RedisConfig
from substore.shared.core.exceptions import StorageIOError
from substore.shared.infrastructure.storage.key_value import KeyValueStore
from substore.shared.utils.logging import get_logger

logger = get_logger(__name__)


class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed key/value store.

    Args:
        client: A redis.asyncio client created with ``decode_responses=False``
        namespace: String prepended to every key
        redis_config: Owner of the client's connection pool, closed on ``close``
    """

    def __init__(
        self,
        client: Redis,
        namespace: str = "",
        redis_config: Optional[RedisConfig] = None,
    ):
        self.client = client
        self.namespace = namespace
        self._redis_config = redis_config

    @classmethod
    def from_config(cls, redis_config: RedisConfig) -> "RedisKeyValueStore":
        """Build a store on the configured connection pool."""
        return cls(
            client=redis_config.create_redis_client(),
            namespace=redis_config.settings.REDIS_KEY_NAMESPACE,
            redis_config=redis_config,
        )

    def _key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    async def get(self, key: str) -> Optional[bytes]:
        try:
            value = await self.client.get(self._key(key))
        except RedisError as e:
            logger.warning(f"Redis GET failed for {key}: {e}", key=key)
            raise StorageIOError(f"Redis read failed: {e}", operation="get", key=key) from e

        if isinstance(value, str):
            return value.encode("utf-8")
        return value

    async def set(self, key: str, value: bytes) -> None:
        try:
            await self.client.set(self._key(key), value)
        except RedisError as e:
            logger.warning(f"Redis SET failed for {key}: {e}", key=key)
            raise StorageIOError(f"Redis write failed: {e}", operation="set", key=key) from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(self._key(key))
        except RedisError as e:
            logger.warning(f"Redis DEL failed for {key}: {e}", key=key)
            raise StorageIOError(f"Redis delete failed: {e}", operation="delete", key=key) from e

    async def close(self) -> None:
        if self._redis_config is not None:
            await self._redis_config.close_connections()
        else:
            await self.client.aclose()
