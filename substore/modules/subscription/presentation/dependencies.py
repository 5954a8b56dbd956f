# 📄 File: substore/modules/subscription/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Hands each subscription web request the one shared subscription keeper the app created at startup.
# 🧪 Purpose (Technical Summary):
# FastAPI dependencies resolving the application-scoped SubscriptionStore from app.state and
# turning plan selections (catalog id or inline plan) into Plan models.
# 🔗 Dependencies:
# FastAPI, substore.modules.subscription.domain
# 🔄 Connected Modules / Calls From:
# substore.modules.subscription.presentation.api.v1.subscription

"""
Subscription Module Dependencies

- get_subscription_store: the store created in the application lifespan
- resolve_plan: Plan from a request's planId or inline plan
"""

from fastapi import HTTPException, Request, status

from substore.modules.subscription.domain.models.subscription import Plan
from substore.modules.subscription.domain.plan_catalog import get_plan
from substore.modules.subscription.domain.services.subscription_store import SubscriptionStore
from substore.modules.subscription.presentation.api.schemas.subscription_schemas import PlanSelection
from substore.shared.utils.logging import get_logger

logger = get_logger(__name__)


async def get_subscription_store(request: Request) -> SubscriptionStore:
    """
    Get the application's SubscriptionStore.

    Raises:
        HTTPException: 503 if startup has not created the store
    """
    store = getattr(request.app.state, "subscription_store", None)
    if store is None:
        logger.error("Subscription store requested before startup completed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Subscription store is not available",
        )
    return store


def resolve_plan(selection: PlanSelection) -> Plan:
    """
    Plan named by a request.

    Raises:
        PlanNotFoundError: If planId is not in the catalog
    """
    if selection.plan is not None:
        return selection.plan
    return get_plan(selection.plan_id)
