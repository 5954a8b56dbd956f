# 📄 File: substore/modules/subscription/presentation/api/schemas/subscription_schemas.py
# 🧭 Purpose (Layman Explanation):
# Defines what the app sends and receives when a screen asks for the subscription, picks a plan,
# or manages payment methods.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for the subscription endpoints. Wire names are camelCase to
# match the stored record; plans may be given by catalog id or inline.
#
# 🔗 Dependencies:
# - pydantic for schema validation and serialization
# - substore.modules.subscription.domain.models (record models reused in responses)
#
# 🔄 Connected Modules / Calls From:
# - substore.modules.subscription.presentation.api.v1.subscription (endpoints)
# - FastAPI automatic request validation and response serialization

"""
Subscription API Schemas

Request Schemas:
- SubscribeRequest: Plan (by id or inline) and billing cycle
- ChangePlanRequest: New plan (by id or inline)
- AddPaymentMethodRequest: Payment method type and display details

Response Schemas:
- SubscriptionSnapshotResponse: Record, loading flag and last storage error
- PlanListResponse: Plan catalog
- TransactionListResponse: Billing history
- SubscriptionHealthResponse: Store load state
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from substore.modules.subscription.domain.models.subscription import (
    BillingCycle,
    PaymentMethodType,
    Plan,
    SubscriptionRecord,
    Transaction,
)


class _CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class PlanSelection(_CamelSchema):
    """Exactly one of planId or plan must be given."""

    plan_id: Optional[str] = Field(default=None, description="Catalog plan id", examples=["pro"])
    plan: Optional[Plan] = Field(default=None, description="Inline plan definition")

    @model_validator(mode="after")
    def check_plan_given(self):
        if (self.plan_id is None) == (self.plan is None):
            raise ValueError("Provide exactly one of planId or plan")
        return self


class SubscribeRequest(PlanSelection):
    """Subscribe to a plan on a billing cycle."""

    billing_cycle: BillingCycle = Field(
        default=BillingCycle.MONTHLY,
        description="monthly (30 days) or annual (365 days)",
    )


class ChangePlanRequest(PlanSelection):
    """Switch to another plan on the current billing cycle."""


class AddPaymentMethodRequest(_CamelSchema):
    """Add a card or PayPal account."""

    type: PaymentMethodType = Field(..., description="card or paypal")
    details: str = Field(..., min_length=1, max_length=200, examples=["Visa ending in 4242"])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class StorageErrorResponse(_CamelSchema):
    message: str
    operation: str
    retry_count: int


class SubscriptionSnapshotResponse(_CamelSchema):
    """Current subscription as seen by the store."""

    subscription: SubscriptionRecord
    is_loading: bool
    error: Optional[str] = None
    last_error: Optional[StorageErrorResponse] = None


class PlanListResponse(_CamelSchema):
    plans: List[Plan]


class TransactionListResponse(_CamelSchema):
    transactions: List[Transaction]


class SubscriptionHealthResponse(_CamelSchema):
    status: str
    state: str
    schema_version: int
    error: Optional[str] = None
