# 📄 File: substore/modules/subscription/domain/validation.py
# 🧭 Purpose (Layman Explanation):
# Checks that a subscription read from storage (or about to be saved) has the right shape
# before the app trusts it.
# 🧪 Purpose (Technical Summary):
# Structural validation of raw subscription dicts against the SubscriptionRecord model.
# Pydantic errors are flattened into a StateValidationError carrying per-field messages.
# 🔗 Dependencies:
# pydantic, substore.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# services/subscription_store.py (after every load, before every save)

from typing import Any, Dict, List

from pydantic import ValidationError

from substore.modules.subscription.domain.models.subscription import SubscriptionRecord
from substore.shared.core.exceptions import StateValidationError


def _flatten_errors(error: ValidationError) -> List[Dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in item["loc"]) or "__root__",
            "message": item["msg"],
        }
        for item in error.errors(include_url=False, include_context=False, include_input=False)
    ]


def validate_subscription_record(data: Any) -> SubscriptionRecord:
    """
    Validate a raw record and build the domain model from it.

    A record is valid when ``currentPlan`` is null or a plan with string id and
    name and a price object, ``status`` and ``billingCycle`` hold known values,
    ``nextBilling`` is null or a string, and ``transactions`` and
    ``paymentMethods`` are lists. List entries are objects whose fields are
    all optional, so history written by another client never fails a load.

    Args:
        data: Raw record, normally a dict using camelCase keys

    Returns:
        SubscriptionRecord: Parsed record, unknown keys preserved

    Raises:
        StateValidationError: If the structure is not a valid record
    """
    if isinstance(data, SubscriptionRecord):
        data = data.to_storage_dict()

    if not isinstance(data, dict):
        raise StateValidationError(
            errors=[{"field": "__root__", "message": f"Expected an object, got {type(data).__name__}"}]
        )

    try:
        return SubscriptionRecord.model_validate(data)
    except ValidationError as e:
        raise StateValidationError(errors=_flatten_errors(e)) from e


def is_valid_subscription_record(data: Any) -> bool:
    """Boolean form of validate_subscription_record"""
    try:
        validate_subscription_record(data)
    except StateValidationError:
        return False
    return True
