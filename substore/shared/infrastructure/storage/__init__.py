# 📄 File: substore/shared/infrastructure/storage/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Sets up the storage "lockers" the subscription store can save into:
# plain memory, a Redis server, or files in a folder.
#
# 🧪 Purpose (Technical Summary):
# Storage infrastructure package exporting the KeyValueStore contract, its
# implementations, and a factory that picks the backend named in settings.
#
# 🔗 Dependencies:
# - key_value.py, redis_store.py, file_store.py
# - substore.shared.config (settings and Redis configuration)
#
# 🔄 Connected Modules / Calls From:
# - substore.main (application startup)
# - Tests constructing stores directly

"""
Storage Infrastructure Package

Backends:
- memory: InMemoryKeyValueStore, process-local
- redis:  RedisKeyValueStore, redis.asyncio with a key namespace
- file:   FileKeyValueStore, one file per key, atomic replace on write

Usage Examples:
    from substore.shared.infrastructure.storage import create_key_value_store

    storage = create_key_value_store()
    await storage.set("@subscription_state_v1", b"{...}")
    raw = await storage.get("@subscription_state_v1")
"""

from typing import Optional

from substore.shared.config.redis import RedisConfig
from substore.shared.config.settings import Settings, get_settings
from substore.shared.utils.logging import get_logger

from .key_value import KeyValueStore, InMemoryKeyValueStore
from .redis_store import RedisKeyValueStore
from .file_store import FileKeyValueStore

logger = get_logger(__name__)


def create_key_value_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """
    Build the key/value backend selected by ``STORAGE_BACKEND``.

    Args:
        settings: Settings to read, defaults to the cached application settings

    Returns:
        KeyValueStore: Ready-to-use backend
    """
    settings = settings or get_settings()
    backend = settings.STORAGE_BACKEND

    if backend == "redis":
        store = RedisKeyValueStore.from_config(RedisConfig(settings))
    elif backend == "file":
        store = FileKeyValueStore(settings.STORAGE_FILE_DIR)
    else:
        store = InMemoryKeyValueStore()

    logger.info(f"Using {backend} storage backend", backend=backend)
    return store


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "FileKeyValueStore",
    "create_key_value_store",
]
