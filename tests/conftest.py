import os
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

import pytest

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_FORMAT", "text")

from substore.modules.subscription.domain.services.subscription_store import SubscriptionStore
from substore.shared.core.event_bus import EventBus
from substore.shared.core.exceptions import StorageIOError
from substore.shared.core.retry import RetryPolicy
from substore.shared.infrastructure.storage.key_value import InMemoryKeyValueStore

FIXED_NOW = datetime(2023, 1, 1, tzinfo=timezone.utc)

LEGACY_RECORD = {
    "currentPlan": {
        "id": "pro",
        "name": "Pro",
        "price": {"monthly": 150, "annual": 1500},
    },
    "status": "active",
    "nextBilling": "2024-01-01T00:00:00.000Z",
}


class RecordingSleep:
    """Async sleep stand-in that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(float(seconds))


class FlakyStorage(InMemoryKeyValueStore):
    """In-memory store whose operations fail a configurable number of times."""

    def __init__(
        self,
        initial: Optional[Dict[str, bytes]] = None,
        fail_get: int = 0,
        fail_set: int = 0,
        fail_delete: int = 0,
        error_factory: Callable[[str], Exception] = lambda op: StorageIOError(f"{op} unavailable", operation=op),
    ):
        super().__init__(initial)
        self.remaining = {"get": fail_get, "set": fail_set, "delete": fail_delete}
        self.error_factory = error_factory
        self.calls: List[tuple] = []

    def _maybe_fail(self, op: str, key: str) -> None:
        self.calls.append((op, key))
        if self.remaining[op] > 0:
            self.remaining[op] -= 1
            raise self.error_factory(op)

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    async def get(self, key):
        self._maybe_fail("get", key)
        return await super().get(key)

    async def set(self, key, value):
        self._maybe_fail("set", key)
        await super().set(key, value)

    async def delete(self, key):
        self._maybe_fail("delete", key)
        await super().delete(key)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def memory_storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def id_factory():
    counter = {"n": 0}

    def _next_id() -> str:
        counter["n"] += 1
        return f"id{counter['n']:07d}"

    return _next_id


@pytest.fixture
def store_factory(recording_sleep, fixed_clock, id_factory):
    """Build an unloaded store with test doubles for time, sleep and ids."""

    def _build(storage, **kwargs) -> SubscriptionStore:
        kwargs.setdefault("sleep", recording_sleep)
        kwargs.setdefault("clock", fixed_clock)
        kwargs.setdefault("id_factory", id_factory)
        kwargs.setdefault("retry_policy", RetryPolicy(max_retries=3, base_delay=1.0))
        kwargs.setdefault("event_bus", EventBus())
        return SubscriptionStore(storage, **kwargs)

    return _build
