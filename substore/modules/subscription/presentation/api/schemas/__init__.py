"""
Subscription API request and response schemas.
"""

from .subscription_schemas import (
    AddPaymentMethodRequest,
    ChangePlanRequest,
    PlanListResponse,
    StorageErrorResponse,
    SubscribeRequest,
    SubscriptionHealthResponse,
    SubscriptionSnapshotResponse,
    TransactionListResponse,
)

__all__ = [
    # Requests
    "SubscribeRequest",
    "ChangePlanRequest",
    "AddPaymentMethodRequest",

    # Responses
    "StorageErrorResponse",
    "SubscriptionSnapshotResponse",
    "PlanListResponse",
    "TransactionListResponse",
    "SubscriptionHealthResponse",
]
