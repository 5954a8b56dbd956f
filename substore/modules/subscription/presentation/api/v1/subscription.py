# 📄 File: substore/modules/subscription/presentation/api/v1/subscription.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints a screen calls to see the current subscription, pick or change a plan,
# cancel, and manage saved payment methods.
#
# 🧪 Purpose (Technical Summary):
# FastAPI subscription endpoints delegating to the application-scoped SubscriptionStore.
# Domain exceptions propagate to the application's SubstoreException handler, which renders
# them as JSON error bodies with their HTTP status.
#
# 🔗 Dependencies:
# - FastAPI router and status codes
# - substore.modules.subscription.domain (store service, plan catalog)
# - substore.modules.subscription.presentation.api.schemas (request/response schemas)
#
# 🔄 Connected Modules / Calls From:
# - substore.api.v1.router (mounted under /subscription)
# - UI clients

"""
Subscription API Endpoints

Endpoints:
- GET (collection root): Current subscription snapshot
- GET /plans: Plan catalog
- POST /subscribe: Subscribe to a plan on a billing cycle
- POST /cancel: Cancel the subscription
- POST /change-plan: Switch plans on the current billing cycle
- POST /payment-methods: Add a payment method
- DELETE /payment-methods/{method_id}: Remove a payment method
- POST /payment-methods/{method_id}/default: Make a payment method the default
- GET /transactions: Billing history
- GET /health: Store load state
"""

from fastapi import APIRouter, Depends, status

from substore.modules.subscription.domain.models.subscription import PaymentMethod
from substore.modules.subscription.domain.plan_catalog import list_plans
from substore.modules.subscription.domain.services.subscription_store import (
    LoadState,
    SubscriptionStore,
)
from substore.modules.subscription.presentation.api.schemas.subscription_schemas import (
    AddPaymentMethodRequest,
    ChangePlanRequest,
    PlanListResponse,
    StorageErrorResponse,
    SubscribeRequest,
    SubscriptionHealthResponse,
    SubscriptionSnapshotResponse,
    TransactionListResponse,
)
from substore.modules.subscription.presentation.dependencies import (
    get_subscription_store,
    resolve_plan,
)
from substore.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Create router
subscription_router = APIRouter()


def _snapshot(store: SubscriptionStore) -> SubscriptionSnapshotResponse:
    failure = store.last_error
    return SubscriptionSnapshotResponse(
        subscription=store.subscription,
        is_loading=store.is_loading,
        error=store.error,
        last_error=StorageErrorResponse(**failure.to_dict()) if failure else None,
    )


@subscription_router.get(
    "",
    response_model=SubscriptionSnapshotResponse,
    summary="Get current subscription",
    description="Current subscription record, loading flag and last storage error",
)
async def get_subscription(
    store: SubscriptionStore = Depends(get_subscription_store),
) -> SubscriptionSnapshotResponse:
    return _snapshot(store)


@subscription_router.get(
    "/plans",
    response_model=PlanListResponse,
    summary="List plans",
)
async def get_plans() -> PlanListResponse:
    return PlanListResponse(plans=list_plans())


@subscription_router.post(
    "/subscribe",
    response_model=SubscriptionSnapshotResponse,
    summary="Subscribe to a plan",
    responses={
        404: {"description": "Unknown plan id"},
        503: {"description": "Subscription could not be saved"},
    },
)
async def subscribe(
    request: SubscribeRequest,
    store: SubscriptionStore = Depends(get_subscription_store),
) -> SubscriptionSnapshotResponse:
    """
    Subscribe to a plan.

    The next billing date is 30 days out for monthly billing and 365 days
    out for annual billing.
    """
    plan = resolve_plan(request)
    await store.subscribe_to_plan(plan, request.billing_cycle)
    logger.info(f"Subscribed to plan {plan.id}", plan_id=plan.id, billing_cycle=request.billing_cycle.value)
    return _snapshot(store)


@subscription_router.post(
    "/cancel",
    response_model=SubscriptionSnapshotResponse,
    summary="Cancel the subscription",
)
async def cancel(
    store: SubscriptionStore = Depends(get_subscription_store),
) -> SubscriptionSnapshotResponse:
    await store.cancel_subscription()
    return _snapshot(store)


@subscription_router.post(
    "/change-plan",
    response_model=SubscriptionSnapshotResponse,
    summary="Change plan",
    responses={404: {"description": "Unknown plan id"}},
)
async def change_plan(
    request: ChangePlanRequest,
    store: SubscriptionStore = Depends(get_subscription_store),
) -> SubscriptionSnapshotResponse:
    plan = resolve_plan(request)
    await store.change_plan(plan)
    return _snapshot(store)


@subscription_router.post(
    "/payment-methods",
    response_model=PaymentMethod,
    status_code=status.HTTP_201_CREATED,
    summary="Add a payment method",
    description="The first payment method added becomes the default",
)
async def add_payment_method(
    request: AddPaymentMethodRequest,
    store: SubscriptionStore = Depends(get_subscription_store),
) -> PaymentMethod:
    return await store.add_payment_method(request.type, request.details)


@subscription_router.delete(
    "/payment-methods/{method_id}",
    response_model=SubscriptionSnapshotResponse,
    summary="Remove a payment method",
    description="Removing the default payment method does not promote another one",
)
async def remove_payment_method(
    method_id: str,
    store: SubscriptionStore = Depends(get_subscription_store),
) -> SubscriptionSnapshotResponse:
    await store.remove_payment_method(method_id)
    return _snapshot(store)


@subscription_router.post(
    "/payment-methods/{method_id}/default",
    response_model=SubscriptionSnapshotResponse,
    summary="Set the default payment method",
    responses={404: {"description": "Unknown payment method id"}},
)
async def set_default_payment_method(
    method_id: str,
    store: SubscriptionStore = Depends(get_subscription_store),
) -> SubscriptionSnapshotResponse:
    await store.set_default_payment_method(method_id)
    return _snapshot(store)


@subscription_router.get(
    "/transactions",
    response_model=TransactionListResponse,
    summary="Get transaction history",
)
async def get_transactions(
    store: SubscriptionStore = Depends(get_subscription_store),
) -> TransactionListResponse:
    return TransactionListResponse(transactions=await store.get_transaction_history())


@subscription_router.get(
    "/health",
    response_model=SubscriptionHealthResponse,
    summary="Subscription store health",
)
async def subscription_health(
    store: SubscriptionStore = Depends(get_subscription_store),
) -> SubscriptionHealthResponse:
    """Healthy when the last load succeeded, degraded when defaults are in use."""
    state = store.state
    if state == LoadState.READY:
        health = "healthy"
    elif state == LoadState.DEGRADED:
        health = "degraded"
    else:
        health = "starting"

    return SubscriptionHealthResponse(
        status=health,
        state=state.value,
        schema_version=store.current_version,
        error=store.error,
    )
