# 📄 File: substore/modules/subscription/domain/models/__init__.py
# 🧭 Purpose (Layman Explanation):
# Gathers the data shapes for a saved subscription in one place
# 🧪 Purpose (Technical Summary):
# Package initialization re-exporting the subscription record models, enums and storage envelope
# 🔗 Dependencies:
# subscription.py
# 🔄 Connected Modules / Calls From:
# Domain services, validation, migrations, presentation layer

"""
Subscription Domain Models

Models:
- SubscriptionRecord: The persisted record (plan, status, billing, history, payment methods)
- Plan / PlanPrice: A purchasable plan and its per-cycle price
- Transaction: One billing transaction
- PaymentMethod: A card or PayPal account on file
- VersionedEnvelope: Storage wrapper carrying the schema version
"""

from .subscription import (
    BillingCycle,
    PaymentMethod,
    PaymentMethodType,
    Plan,
    PlanPrice,
    SubscriptionRecord,
    SubscriptionStatus,
    Transaction,
    TransactionStatus,
    VersionedEnvelope,
)

__all__ = [
    # Record and parts
    "SubscriptionRecord",
    "Plan",
    "PlanPrice",
    "Transaction",
    "PaymentMethod",
    "VersionedEnvelope",

    # Enums
    "SubscriptionStatus",
    "BillingCycle",
    "TransactionStatus",
    "PaymentMethodType",
]
