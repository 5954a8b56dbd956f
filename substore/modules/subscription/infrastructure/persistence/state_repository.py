# 📄 File: substore/modules/subscription/infrastructure/persistence/state_repository.py
# 🧭 Purpose (Layman Explanation):
# Reads and writes the saved subscription in whichever storage the app is configured to use,
# using one name per data format so older copies can be found and cleaned up.
# 🧪 Purpose (Technical Summary):
# KeyValueStore-backed implementation of SubscriptionStateRepository. Combines the versioned
# keyspace with the JSON envelope codec; backend failures propagate as StorageIOError.
# 🔗 Dependencies:
# - substore.shared.infrastructure.storage (KeyValueStore)
# - keyspace.py, envelope_codec.py
# 🔄 Connected Modules / Calls From:
# - services/subscription_store.py

from typing import Any, Dict, List, Optional

from substore.modules.subscription.domain.repositories.subscription_state_repository import (
    StoredState,
    SubscriptionStateRepository,
)
from substore.shared.infrastructure.storage.key_value import KeyValueStore
from substore.shared.utils.logging import get_logger

from .envelope_codec import decode_envelope, encode_envelope
from .keyspace import StorageKeyspace

logger = get_logger(__name__)


class KeyValueStateRepository(SubscriptionStateRepository):
    """
    Subscription envelopes stored in a key/value byte store.

    Args:
        storage: Backend holding the bytes
        keyspace: Key naming for each schema version
    """

    def __init__(self, storage: KeyValueStore, keyspace: StorageKeyspace):
        self.storage = storage
        self.keyspace = keyspace

    @property
    def current_version(self) -> int:
        return self.keyspace.current_version

    async def read_latest(self) -> Optional[StoredState]:
        for version, key in self.keyspace.search_order():
            payload = await self.storage.get(key)
            if payload is None:
                continue

            logger.debug(f"Found subscription state at {key}", key=key, key_version=version)
            return StoredState(key=key, key_version=version, raw=decode_envelope(payload, key))

        return None

    async def write_current(self, envelope: Dict[str, Any]) -> None:
        await self.storage.set(self.keyspace.current_key, encode_envelope(envelope))

    async def delete_legacy(self) -> List[str]:
        keys = self.keyspace.legacy_keys()
        for key in keys:
            await self.storage.delete(key)
        return keys
