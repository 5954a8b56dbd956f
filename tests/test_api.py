import json

import pytest
from fastapi.testclient import TestClient

from substore.main import create_application
from substore.shared.config.settings import Settings
from substore.shared.infrastructure.storage.key_value import InMemoryKeyValueStore

from conftest import LEGACY_RECORD, FlakyStorage

BASE = "/api/v1/subscription"


@pytest.fixture
def test_settings():
    return Settings(ENVIRONMENT="test", STORAGE_BACKEND="memory")


@pytest.fixture
def make_client(test_settings, recording_sleep, fixed_clock, id_factory):
    def _make(storage=None):
        app = create_application(
            settings=test_settings,
            storage=storage if storage is not None else InMemoryKeyValueStore(),
            store_options={"sleep": recording_sleep, "clock": fixed_clock, "id_factory": id_factory},
        )
        return TestClient(app)

    return _make


def test_root_and_health(make_client):
    with make_client() as client:
        root = client.get("/")
        assert root.status_code == 200
        assert root.json()["api_base"] == "/api/v1"

        health = client.get("/api/v1/health")
        assert health.status_code == 200
        assert health.json()["status"] == "healthy"

        ready = client.get("/api/v1/health/ready")
        assert ready.status_code == 200
        assert ready.json()["store_state"] == "ready"
        assert ready.json()["degraded"] is False


def test_snapshot_of_fresh_store(make_client):
    with make_client() as client:
        response = client.get(BASE)

    assert response.status_code == 200
    body = response.json()
    assert body["isLoading"] is False
    assert body["error"] is None
    assert body["subscription"]["status"] == "expired"
    assert body["subscription"]["currentPlan"] is None
    assert body["subscription"]["paymentMethods"] == []


def test_plan_catalog(make_client):
    with make_client() as client:
        response = client.get(f"{BASE}/plans")

    plans = response.json()["plans"]
    assert [plan["id"] for plan in plans] == ["basic", "pro", "premium"]
    assert plans[1]["isPopular"] is True


def test_subscribe_by_plan_id(make_client):
    with make_client() as client:
        response = client.post(f"{BASE}/subscribe", json={"planId": "pro", "billingCycle": "annual"})

    assert response.status_code == 200
    subscription = response.json()["subscription"]
    assert subscription["currentPlan"]["id"] == "pro"
    assert subscription["status"] == "active"
    assert subscription["billingCycle"] == "annual"
    assert subscription["nextBilling"] == "2024-01-01T00:00:00.000Z"


def test_subscribe_unknown_plan_is_404(make_client):
    with make_client() as client:
        response = client.post(f"{BASE}/subscribe", json={"planId": "enterprise"})

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["details"]["resource_id"] == "enterprise"


def test_subscribe_requires_exactly_one_plan(make_client):
    with make_client() as client:
        assert client.post(f"{BASE}/subscribe", json={}).status_code == 422
        both = {
            "planId": "pro",
            "plan": {"id": "x", "name": "X", "price": {"monthly": 1, "annual": 10}},
        }
        assert client.post(f"{BASE}/subscribe", json=both).status_code == 422


def test_change_plan_and_cancel(make_client):
    with make_client() as client:
        client.post(f"{BASE}/subscribe", json={"planId": "basic"})
        changed = client.post(f"{BASE}/change-plan", json={"planId": "premium"})
        cancelled = client.post(f"{BASE}/cancel")

    assert changed.json()["subscription"]["currentPlan"]["id"] == "premium"
    body = cancelled.json()["subscription"]
    assert body["status"] == "cancelled"
    assert body["currentPlan"]["id"] == "premium"


def test_payment_method_lifecycle(make_client):
    with make_client() as client:
        first = client.post(f"{BASE}/payment-methods", json={"type": "card", "details": "Visa ending in 4242"})
        second = client.post(f"{BASE}/payment-methods", json={"type": "paypal", "details": "user@example.com"})
        assert first.status_code == 201
        assert first.json()["isDefault"] is True
        assert second.json()["isDefault"] is False

        second_id = second.json()["id"]
        made_default = client.post(f"{BASE}/payment-methods/{second_id}/default")
        methods = made_default.json()["subscription"]["paymentMethods"]
        assert [m["isDefault"] for m in methods] == [False, True]

        missing = client.post(f"{BASE}/payment-methods/unknown/default")
        assert missing.status_code == 404

        removed = client.delete(f"{BASE}/payment-methods/{second_id}")
        remaining = removed.json()["subscription"]["paymentMethods"]
        assert [m["id"] for m in remaining] == [first.json()["id"]]
        assert remaining[0]["isDefault"] is False


def test_payment_method_validation(make_client):
    with make_client() as client:
        assert client.post(f"{BASE}/payment-methods", json={"type": "cash", "details": "x"}).status_code == 422
        assert client.post(f"{BASE}/payment-methods", json={"type": "card", "details": ""}).status_code == 422


def test_transactions_start_empty(make_client):
    with make_client() as client:
        response = client.get(f"{BASE}/transactions")

    assert response.status_code == 200
    assert response.json() == {"transactions": []}


def test_legacy_state_is_migrated_at_startup(make_client):
    storage = InMemoryKeyValueStore({"@subscription_state_v0": json.dumps(LEGACY_RECORD).encode("utf-8")})

    with make_client(storage) as client:
        body = client.get(BASE).json()
        health = client.get(f"{BASE}/health").json()

    assert body["subscription"]["currentPlan"]["id"] == "pro"
    assert body["subscription"]["billingCycle"] == "monthly"
    assert health == {"status": "healthy", "state": "ready", "schemaVersion": 1, "error": None}
    assert storage.keys() == ["@subscription_state_v1"]


def test_degraded_store_still_serves(make_client, recording_sleep):
    storage = FlakyStorage(fail_get=100)

    with make_client(storage) as client:
        snapshot = client.get(BASE).json()
        health = client.get(f"{BASE}/health").json()
        ready = client.get("/api/v1/health/ready").json()

    assert recording_sleep.delays == [1.0, 2.0, 3.0]
    assert snapshot["subscription"]["status"] == "expired"
    assert snapshot["error"] == "get unavailable"
    assert snapshot["lastError"] == {"message": "get unavailable", "operation": "load", "retryCount": 3}
    assert health["status"] == "degraded"
    assert ready["degraded"] is True


def test_failed_save_is_503(make_client):
    storage = FlakyStorage()

    with make_client(storage) as client:
        storage.remaining["set"] = 100
        response = client.post(f"{BASE}/cancel")
        snapshot = client.get(BASE).json()

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "SUBSCRIPTION_PERSISTENCE_ERROR"
    assert response.json()["error"]["details"]["attempts"] == 4
    assert snapshot["subscription"]["status"] == "expired"
    assert snapshot["lastError"]["operation"] == "save"
