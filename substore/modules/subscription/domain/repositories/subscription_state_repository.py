# 📄 File: substore/modules/subscription/domain/repositories/subscription_state_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines what the app needs from storage to keep the subscription: find the newest saved copy,
# save a new copy, and clear out copies saved in older formats.
# 🧪 Purpose (Technical Summary):
# Abstract repository interface over versioned subscription envelopes. Implementations own key
# naming and byte encoding; the store service owns migration, validation and retries.
# 🔗 Dependencies:
# - abc (Abstract Base Classes)
# - dataclasses
# 🔄 Connected Modules / Calls From:
# - services/subscription_store.py (consumer)
# - infrastructure/persistence/state_repository.py (key/value implementation)

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class StoredState:
    """A decoded envelope and the key it was read from."""
    key: str
    key_version: int
    raw: Any


class SubscriptionStateRepository(ABC):
    """
    Abstract repository for persisted subscription envelopes.

    Envelopes are plain dicts ``{"version": int, "data": {...}}``. Legacy values
    written before versioning may be a bare record.
    """

    @property
    @abstractmethod
    def current_version(self) -> int:
        """Schema version written by ``write_current``."""
        pass

    @abstractmethod
    async def read_latest(self) -> Optional[StoredState]:
        """Return the newest stored envelope, checking newer keys first, or None."""
        pass

    @abstractmethod
    async def write_current(self, envelope: Dict[str, Any]) -> None:
        """Persist ``envelope`` under the current-version key."""
        pass

    @abstractmethod
    async def delete_legacy(self) -> List[str]:
        """Remove every older-version key; return the keys attempted."""
        pass
