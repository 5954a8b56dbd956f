import json

import pytest

from substore.modules.subscription.domain.events import SUBSCRIPTION_DEGRADED, SUBSCRIPTION_LOADED
from substore.modules.subscription.domain.models.subscription import SubscriptionRecord
from substore.modules.subscription.domain.services.subscription_store import (
    LoadState,
    SubscriptionStore,
)
from substore.shared.infrastructure.storage.key_value import InMemoryKeyValueStore

from conftest import LEGACY_RECORD, FlakyStorage

CURRENT_KEY = "@subscription_state_v1"
LEGACY_KEY = "@subscription_state_v0"


def _envelope(data, version=1):
    return json.dumps({"version": version, "data": data}).encode("utf-8")


def _stored(storage, key=CURRENT_KEY):
    return json.loads(storage._data[key].decode("utf-8")) if key in storage.keys() else None


@pytest.mark.asyncio
async def test_new_store_starts_idle(store_factory, memory_storage):
    store = store_factory(memory_storage)

    assert store.state == LoadState.IDLE
    assert store.is_loading is True
    assert store.subscription == SubscriptionRecord.default()


@pytest.mark.asyncio
async def test_empty_storage_loads_defaults(store_factory, memory_storage, recording_sleep):
    store = store_factory(memory_storage)

    record = await store.load()

    assert record == SubscriptionRecord.default()
    assert store.state == LoadState.READY
    assert store.is_loading is False
    assert store.error is None
    assert memory_storage.keys() == []
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_current_envelope_loads_without_rewrite(store_factory):
    data = {**SubscriptionRecord.default().to_storage_dict(), "status": "cancelled", "customField": 7}
    storage = FlakyStorage({CURRENT_KEY: _envelope(data)})
    store = store_factory(storage)

    await store.load()

    assert store.subscription.status == "cancelled"
    assert store.subscription.to_storage_dict()["customField"] == 7
    assert storage.count("set") == 0
    assert storage.count("delete") == 0


@pytest.mark.asyncio
async def test_legacy_record_is_migrated_and_old_key_removed(store_factory):
    storage = InMemoryKeyValueStore({LEGACY_KEY: json.dumps(LEGACY_RECORD).encode("utf-8")})
    store = store_factory(storage)
    loaded = []
    store.subscribe(lambda event: loaded.append(event.payload), SUBSCRIPTION_LOADED)

    record = await store.load()

    expected = {**LEGACY_RECORD, "billingCycle": "monthly", "transactions": [], "paymentMethods": []}
    assert store.state == LoadState.READY
    assert record.to_storage_dict() == expected

    assert storage.keys() == [CURRENT_KEY]
    assert _stored(storage) == {"version": 1, "data": expected}
    assert loaded[0]["migrated_from"] == 0


@pytest.mark.asyncio
async def test_versioned_v0_envelope_is_migrated(store_factory):
    storage = InMemoryKeyValueStore({LEGACY_KEY: _envelope(LEGACY_RECORD, version=0)})
    store = store_factory(storage)

    await store.load()

    assert store.subscription.billing_cycle == "monthly"
    assert storage.keys() == [CURRENT_KEY]


@pytest.mark.asyncio
async def test_future_version_degrades_without_retry(store_factory, recording_sleep):
    storage = FlakyStorage({CURRENT_KEY: _envelope({}, version=999)})
    store = store_factory(storage)
    degraded = []
    store.subscribe(lambda event: degraded.append(event.payload), SUBSCRIPTION_DEGRADED)

    record = await store.load()

    assert record == SubscriptionRecord.default()
    assert store.state == LoadState.DEGRADED
    assert store.is_loading is False
    assert "Missing migration for version 999" in store.error
    assert store.last_error.operation == "load"
    assert recording_sleep.delays == []
    assert storage.count("get") == 1
    assert degraded[0]["error"]["message"] == store.error


@pytest.mark.asyncio
async def test_corrupt_payload_degrades_without_retry(store_factory, recording_sleep):
    storage = FlakyStorage({CURRENT_KEY: b"{this is not json"})
    store = store_factory(storage)

    await store.load()

    assert store.state == LoadState.DEGRADED
    assert store.error.startswith("Failed to parse subscription state")
    assert recording_sleep.delays == []
    assert _stored(storage) is None


@pytest.mark.asyncio
async def test_invalid_record_degrades(store_factory):
    data = {**SubscriptionRecord.default().to_storage_dict(), "status": "paused"}
    store = store_factory(InMemoryKeyValueStore({CURRENT_KEY: _envelope(data)}))

    await store.load()

    assert store.state == LoadState.DEGRADED
    assert store.error == "Invalid subscription state structure"
    assert store.subscription == SubscriptionRecord.default()


@pytest.mark.asyncio
async def test_unavailable_storage_retries_then_degrades(store_factory, recording_sleep):
    storage = FlakyStorage(fail_get=100)
    store = store_factory(storage)

    await store.load()

    assert storage.count("get") == 4
    assert recording_sleep.delays == [1.0, 2.0, 3.0]
    assert store.state == LoadState.DEGRADED
    assert store.last_error.operation == "load"
    assert store.last_error.retry_count == 3
    assert store.error == "get unavailable"


@pytest.mark.asyncio
async def test_transient_failure_then_success(store_factory, recording_sleep):
    storage = FlakyStorage({CURRENT_KEY: _envelope(SubscriptionRecord.default().to_storage_dict())}, fail_get=1)
    store = store_factory(storage)

    await store.load()

    assert store.state == LoadState.READY
    assert store.error is None
    assert store.last_error is None
    assert recording_sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_unexpected_backend_errors_are_retried(store_factory, recording_sleep):
    storage = FlakyStorage(fail_get=2, error_factory=lambda op: ConnectionResetError("reset by peer"))
    store = store_factory(storage)

    await store.load()

    assert store.state == LoadState.READY
    assert recording_sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_create_returns_loaded_store(recording_sleep, fixed_clock):
    store = await SubscriptionStore.create(InMemoryKeyValueStore(), sleep=recording_sleep, clock=fixed_clock)

    assert store.state == LoadState.READY


def test_store_requires_storage_or_repository():
    with pytest.raises(ValueError):
        SubscriptionStore()


def _active_record(**overrides):
    record = {
        "currentPlan": {"id": "pro", "name": "Pro", "price": {"monthly": 150, "annual": 1500}},
        "status": "active",
        "nextBilling": "2023-01-31T00:00:00.000Z",
        "billingCycle": "monthly",
        "transactions": [],
        "paymentMethods": [],
    }
    record.update(overrides)
    return record


@pytest.mark.asyncio
async def test_partial_history_entries_still_load(store_factory):
    data = _active_record(
        transactions=[{"id": "t1", "amount": 150, "status": "success"}],
        paymentMethods=[{"id": "m1", "type": "card"}],
    )
    storage = InMemoryKeyValueStore({CURRENT_KEY: _envelope(data)})
    store = store_factory(storage)

    await store.load()

    assert store.state == LoadState.READY
    assert store.subscription.current_plan.id == "pro"
    assert store.subscription.to_storage_dict() == data

    await store.add_payment_method("card", "Visa ending in 4242")

    stored = _stored(storage)["data"]
    assert stored["currentPlan"]["id"] == "pro"
    assert stored["status"] == "active"
    assert stored["transactions"] == [{"id": "t1", "amount": 150, "status": "success"}]
    assert stored["paymentMethods"][0] == {"id": "m1", "type": "card"}


@pytest.mark.asyncio
async def test_unknown_entry_fields_survive_a_save(store_factory):
    transaction = {
        "id": "t1",
        "date": "2023-01-01T00:00:00.000Z",
        "amount": 150,
        "status": "success",
        "paymentMethod": "Visa ending in 4242",
        "description": "Pro monthly",
        "invoiceUrl": "https://billing.example.com/t1",
    }
    method = {"id": "m1", "type": "card", "details": "Visa ending in 4242", "isDefault": True, "brand": "visa"}
    storage = InMemoryKeyValueStore({
        CURRENT_KEY: _envelope(_active_record(transactions=[transaction], paymentMethods=[method])),
    })
    store = store_factory(storage)
    await store.load()

    await store.cancel_subscription()

    stored = _stored(storage)["data"]
    assert stored["transactions"] == [transaction]
    assert stored["paymentMethods"] == [method]


@pytest.mark.asyncio
async def test_migration_write_is_retried(store_factory, recording_sleep):
    storage = FlakyStorage({LEGACY_KEY: json.dumps(LEGACY_RECORD).encode("utf-8")}, fail_set=1)
    store = store_factory(storage)

    await store.load()

    assert store.state == LoadState.READY
    assert recording_sleep.delays == [1.0]
    assert storage.count("set") == 2
    assert storage.keys() == [CURRENT_KEY]
    assert store.subscription.current_plan.id == "pro"


@pytest.mark.asyncio
async def test_saved_record_reloads_equal(store_factory):
    storage = InMemoryKeyValueStore()
    writer = store_factory(storage)
    await writer.load()
    record = _active_record(
        billingCycle="annual",
        transactions=[{
            "id": "t1",
            "date": "2023-01-01T00:00:00.000Z",
            "amount": 1500,
            "status": "success",
            "paymentMethod": "PayPal",
            "description": "Pro annual",
        }],
        paymentMethods=[{"id": "m1", "type": "paypal", "details": "PayPal", "isDefault": True}],
        referralCode="FRIEND10",
    )

    saved = await writer.save(record)

    reader = store_factory(storage)
    loaded = await reader.load()

    assert reader.state == LoadState.READY
    assert loaded == saved
    assert loaded.to_storage_dict() == record
