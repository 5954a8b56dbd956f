# 📄 File: substore/shared/infrastructure/storage/key_value.py

# 🧭 Purpose (Layman Explanation):
# Describes the simple "locker" the subscription store saves into: put bytes under a name,
# read them back, or throw them away. Also provides a locker that lives only in memory.

# 🧪 Purpose (Technical Summary):
# Abstract async key/value byte-store contract (get/set/delete) consumed by the
# subscription store, plus the in-memory implementation used for tests and embedded use.

# 🔗 Dependencies:
# - abc: Interface definition
# - asyncio: Lock for the in-memory implementation

# 🔄 Connected Modules / Calls From:
# Implemented by: redis_store.RedisKeyValueStore, file_store.FileKeyValueStore
# Used by: substore.modules.subscription.domain.services.subscription_store

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class KeyValueStore(ABC):
    """
    Async key/value byte store addressed by string keys.

    Implementations raise ``StorageIOError`` for backend failures. Deleting a
    key that does not exist is a no-op.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """Return the bytes stored at ``key`` or None when absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """Store ``value`` at ``key``, replacing any previous value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; contents vanish with the process."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[bytes]:
        async with self._lock:
            return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"Value for {key!r} must be bytes, got {type(value).__name__}")
        async with self._lock:
            self._data[key] = bytes(value)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    def keys(self) -> List[str]:
        """Snapshot of the stored keys."""
        return sorted(self._data)
