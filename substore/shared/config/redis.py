# 📄 File: substore/shared/config/redis.py
#
# 🧭 Purpose (Layman Explanation):
# Configuration for the Redis server that can hold the saved subscription,
# so the data survives app restarts and can live outside the process.
#
# 🧪 Purpose (Technical Summary):
# Redis configuration with connection pooling and environment-specific
# socket settings. The client is binary-safe (no response decoding) because
# the subscription store exchanges raw envelope bytes.
#
# 🔗 Dependencies:
# - redis Python package (redis.asyncio)
# - substore.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - substore.shared.infrastructure.storage.redis_store
# - substore.main (shutdown cleanup)

from typing import Any, Dict, Optional

from redis.asyncio import ConnectionPool, Redis

from .settings import Settings, get_settings


# =============================================================================
# REDIS CONFIGURATION CLASS
# =============================================================================

class RedisConfig:
    """Redis configuration class with connection management."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._connection_pool: Optional[ConnectionPool] = None
        self._redis_client: Optional[Redis] = None

    @property
    def redis_url(self) -> str:
        """Get Redis connection URL."""
        return self.settings.redis_url

    @property
    def connection_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection configuration."""

        base_config = {
            "decode_responses": False,
            "health_check_interval": 30,
            "socket_timeout": self.settings.REDIS_SOCKET_TIMEOUT,
            "socket_connect_timeout": self.settings.REDIS_SOCKET_TIMEOUT,
        }

        if self.settings.is_production:
            base_config.update({
                "socket_keepalive": True,
            })

        return base_config

    @property
    def pool_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection pool configuration."""
        return {
            "max_connections": self.settings.REDIS_MAX_CONNECTIONS,
            **self.connection_kwargs
        }

    def create_connection_pool(self) -> ConnectionPool:
        """Create Redis connection pool."""
        if self._connection_pool is None:
            self._connection_pool = ConnectionPool.from_url(
                self.redis_url,
                **self.pool_kwargs
            )
        return self._connection_pool

    def create_redis_client(self) -> Redis:
        """Create Redis client with connection pool."""
        if self._redis_client is None:
            pool = self.create_connection_pool()
            self._redis_client = Redis(connection_pool=pool)
        return self._redis_client

    async def close_connections(self):
        """Close Redis connections and cleanup."""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None

        if self._connection_pool:
            await self._connection_pool.disconnect()
            self._connection_pool = None

