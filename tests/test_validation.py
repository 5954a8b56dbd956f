import pytest

from substore.modules.subscription.domain.models.subscription import (
    BillingCycle,
    SubscriptionRecord,
)
from substore.modules.subscription.domain.plan_catalog import get_plan, list_plans
from substore.modules.subscription.domain.validation import (
    is_valid_subscription_record,
    validate_subscription_record,
)
from substore.shared.core.exceptions import PlanNotFoundError, StateValidationError


def _record(**overrides):
    record = {
        "currentPlan": None,
        "status": "expired",
        "nextBilling": None,
        "billingCycle": "monthly",
        "transactions": [],
        "paymentMethods": [],
    }
    record.update(overrides)
    return record


def test_default_record_is_valid():
    default = SubscriptionRecord.default()

    assert is_valid_subscription_record(default)
    assert default.to_storage_dict() == _record()


def test_full_record_round_trips_with_camel_case_keys():
    data = _record(
        currentPlan={"id": "pro", "name": "Pro", "price": {"monthly": 150, "annual": 1500}},
        status="active",
        nextBilling="2024-01-31T00:00:00.000Z",
        billingCycle="annual",
        transactions=[{
            "id": "t1",
            "date": "2024-01-01T00:00:00.000Z",
            "amount": 1500,
            "status": "success",
            "paymentMethod": "Visa ending in 4242",
            "description": "Pro annual",
        }],
        paymentMethods=[{"id": "m1", "type": "card", "details": "Visa ending in 4242", "isDefault": True}],
    )

    record = validate_subscription_record(data)

    assert record.billing_cycle == BillingCycle.ANNUAL.value
    assert record.default_payment_method.id == "m1"
    stored = record.to_storage_dict()
    assert stored["transactions"][0]["paymentMethod"] == "Visa ending in 4242"
    assert stored["paymentMethods"][0]["isDefault"] is True


def test_unknown_fields_survive_validation():
    record = validate_subscription_record(_record(customField="kept"))

    assert record.to_storage_dict()["customField"] == "kept"


@pytest.mark.parametrize(
    "overrides",
    [
        {"status": "paused"},
        {"billingCycle": "weekly"},
        {"nextBilling": 12345},
        {"transactions": "none"},
        {"paymentMethods": None},
        {"currentPlan": {"id": "pro", "price": {"monthly": 1, "annual": 10}}},
    ],
)
def test_malformed_records_are_rejected(overrides):
    with pytest.raises(StateValidationError) as exc_info:
        validate_subscription_record(_record(**overrides))

    assert exc_info.value.status_code == 422
    assert exc_info.value.details["errors"]


def test_missing_required_field_is_rejected():
    data = _record()
    del data["transactions"]

    assert not is_valid_subscription_record(data)


def test_non_object_is_rejected():
    with pytest.raises(StateValidationError) as exc_info:
        validate_subscription_record("active")

    assert exc_info.value.details["errors"][0]["field"] == "__root__"


def test_plan_catalog():
    plans = list_plans()

    assert [plan.id for plan in plans] == ["basic", "pro", "premium"]
    assert get_plan("pro").is_popular is True
    assert get_plan("premium").price_for("annual") == 3000


def test_catalog_returns_copies():
    plan = get_plan("basic")
    plan.features.append("tampered")

    assert "tampered" not in get_plan("basic").features


def test_unknown_plan_raises():
    with pytest.raises(PlanNotFoundError):
        get_plan("enterprise")


def test_entries_only_need_to_be_objects():
    data = _record(
        transactions=[{"id": "t1", "amount": 150, "status": "refunded"}],
        paymentMethods=[{"id": "m1"}],
    )

    record = validate_subscription_record(data)

    assert record.to_storage_dict() == data
    assert record.default_payment_method is None
