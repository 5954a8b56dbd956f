# 📄 File: substore/modules/subscription/domain/models/subscription.py
# 🧭 Purpose (Layman Explanation):
# Describes what a saved subscription looks like - the chosen plan, whether it is active,
# when the next bill is due, past payments, and the cards or PayPal accounts on file.
# 🧪 Purpose (Technical Summary):
# Pydantic domain models for the persisted subscription record and its parts (Plan,
# Transaction, PaymentMethod) plus the versioned storage envelope. Wire names are camelCase,
# Python attributes are snake_case; unknown stored fields are kept on the record.
# 🔗 Dependencies:
# pydantic, typing, enum
# 🔄 Connected Modules / Calls From:
# validation.py, migrations.py, plan_catalog.py, services/subscription_store.py, presentation schemas

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SubscriptionStatus(str, Enum):
    """Lifecycle status of the subscription record"""
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class BillingCycle(str, Enum):
    """How often the active plan is billed"""
    MONTHLY = "monthly"
    ANNUAL = "annual"

    @property
    def period_days(self) -> int:
        """Length of one billing period in days"""
        return 365 if self is BillingCycle.ANNUAL else 30


class TransactionStatus(str, Enum):
    """Outcome of a billing transaction"""
    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"


class PaymentMethodType(str, Enum):
    """Kinds of payment method a user can keep on file"""
    CARD = "card"
    PAYPAL = "paypal"


class _CamelModel(BaseModel):
    """
    Base model reading and writing camelCase wire names.

    Extra keys are preserved so a record written by a newer client survives a
    round trip through this one.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="allow",
    )


class PlanPrice(_CamelModel):
    """Price of a plan per billing cycle"""
    monthly: float
    annual: float


class Plan(_CamelModel):
    """
    A purchasable subscription plan.

    ``features`` and ``isPopular`` are optional on stored plans and are only
    written back when they were present.
    """

    id: str
    name: str
    price: PlanPrice
    features: List[str] = Field(default_factory=list)
    is_popular: Optional[bool] = None

    def price_for(self, billing_cycle: "BillingCycle | str") -> float:
        """
        Price charged for one period of the given billing cycle.

        Args:
            billing_cycle: BillingCycle member or its string value

        Returns:
            Price for the cycle
        """
        cycle = BillingCycle(billing_cycle)
        return self.price.annual if cycle is BillingCycle.ANNUAL else self.price.monthly


class Transaction(_CamelModel):
    """
    A single billing transaction; dates are ISO-8601 UTC strings.

    Stored history may have been written by other clients, so every field is
    optional and unknown statuses are kept as plain strings.
    """
    id: Optional[str] = None
    date: Optional[str] = None
    amount: Optional[float] = None
    status: Optional[str] = None
    payment_method: Optional[str] = None
    description: Optional[str] = None


class PaymentMethod(_CamelModel):
    """A payment method on file; fields are optional on stored entries"""
    id: Optional[str] = None
    type: Optional[str] = None
    details: Optional[str] = None
    is_default: bool = False


class SubscriptionRecord(_CamelModel):
    """
    The persisted subscription record.

    Fields:
    - current_plan: active plan, None when no plan is selected
    - status: active / expired / cancelled
    - next_billing: ISO-8601 timestamp of the next charge, or None
    - billing_cycle: monthly / annual
    - transactions: ordered billing history, append-only
    - payment_methods: payment methods on file, at most one default
    """

    current_plan: Optional[Plan] = None
    status: SubscriptionStatus
    next_billing: Optional[str] = None
    billing_cycle: BillingCycle
    transactions: List[Transaction]
    payment_methods: List[PaymentMethod]

    @classmethod
    def default(cls) -> "SubscriptionRecord":
        """
        Record used when nothing is stored or loading failed.

        Returns:
            Expired record with no plan, history or payment methods
        """
        return cls(
            current_plan=None,
            status=SubscriptionStatus.EXPIRED,
            next_billing=None,
            billing_cycle=BillingCycle.MONTHLY,
            transactions=[],
            payment_methods=[],
        )

    def to_storage_dict(self) -> Dict[str, Any]:
        """
        JSON-ready dict using the camelCase wire names.

        Optional fields that were never given (a stored plan without
        ``features``, a payment method without ``isDefault``) are left out.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    def find_payment_method(self, method_id: str) -> Optional[PaymentMethod]:
        for method in self.payment_methods:
            if method.id == method_id:
                return method
        return None

    @property
    def default_payment_method(self) -> Optional[PaymentMethod]:
        for method in self.payment_methods:
            if method.is_default:
                return method
        return None


class VersionedEnvelope(BaseModel):
    """Storage wrapper tagging a record with its schema version"""
    version: int
    data: Dict[str, Any]
