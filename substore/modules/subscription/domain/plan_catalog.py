# 📄 File: substore/modules/subscription/domain/plan_catalog.py
# 🧭 Purpose (Layman Explanation):
# The list of plans a user can buy - Basic, Pro and Premium - with their prices and perks.
# 🧪 Purpose (Technical Summary):
# Static plan catalog with lookup by id. Plans are immutable templates; lookups return copies
# so callers cannot mutate the shared catalog.
# 🔗 Dependencies:
# models/subscription.py, substore.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# presentation/api/v1/subscription.py (plan listing, subscribe and change-plan by id)

from typing import Dict, List

from substore.modules.subscription.domain.models.subscription import Plan, PlanPrice
from substore.shared.core.exceptions import PlanNotFoundError

PLAN_CATALOG: Dict[str, Plan] = {
    "basic": Plan(
        id="basic",
        name="Basic",
        price=PlanPrice(monthly=80, annual=800),
        features=[
            "Basic features access",
            "Standard support",
            "1 user account",
            "Basic analytics",
        ],
    ),
    "pro": Plan(
        id="pro",
        name="Pro",
        price=PlanPrice(monthly=150, annual=1500),
        features=[
            "All Basic features",
            "Priority support",
            "5 user accounts",
            "Advanced analytics",
            "Custom integrations",
        ],
        is_popular=True,
    ),
    "premium": Plan(
        id="premium",
        name="Premium",
        price=PlanPrice(monthly=300, annual=3000),
        features=[
            "All Pro features",
            "24/7 Premium support",
            "Unlimited user accounts",
            "Enterprise analytics",
            "Custom development",
            "Dedicated account manager",
        ],
    ),
}


def get_plan(plan_id: str) -> Plan:
    """
    Look up a plan by id.

    Args:
        plan_id: Catalog id such as "basic", "pro" or "premium"

    Returns:
        Plan: Copy of the catalog entry

    Raises:
        PlanNotFoundError: If the id is not in the catalog
    """
    plan = PLAN_CATALOG.get(plan_id)
    if plan is None:
        raise PlanNotFoundError(plan_id)
    return plan.model_copy(deep=True)


def list_plans() -> List[Plan]:
    """All plans in display order"""
    return [plan.model_copy(deep=True) for plan in PLAN_CATALOG.values()]
