# 📄 File: substore/modules/subscription/domain/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes the rules for the user's subscription - what a valid saved subscription looks like,
# how old saved formats are upgraded, and how plans and payment methods change
# 🧪 Purpose (Technical Summary):
# Domain layer initialization containing the record models, validation, migrations, plan catalog,
# repository interface, domain events and the SubscriptionStore service
# 🔗 Dependencies:
# Domain models, services, repositories, events from subpackages
# 🔄 Connected Modules / Calls From:
# Infrastructure layer, Presentation layer, substore.main

"""
Subscription Domain Layer

Domain Models:
- SubscriptionRecord, Plan, Transaction, PaymentMethod, VersionedEnvelope

Domain Services:
- SubscriptionStore: load/save/migrate/retry and the subscription mutations

Repository Interfaces:
- SubscriptionStateRepository: versioned envelope storage

Business Rules Enforced:
- Records are validated after every load and before every save
- Stored records are migrated one version at a time up to CURRENT_VERSION
- At most one payment method is the default
"""

from .models.subscription import (
    BillingCycle,
    PaymentMethod,
    PaymentMethodType,
    Plan,
    PlanPrice,
    SubscriptionRecord,
    SubscriptionStatus,
    Transaction,
    TransactionStatus,
)
from .migrations import CURRENT_VERSION, MIGRATIONS, migrate_state
from .plan_catalog import PLAN_CATALOG, get_plan, list_plans
from .validation import validate_subscription_record

__all__ = [
    # Domain Models
    "SubscriptionRecord",
    "Plan",
    "PlanPrice",
    "Transaction",
    "PaymentMethod",
    "SubscriptionStatus",
    "BillingCycle",
    "TransactionStatus",
    "PaymentMethodType",

    # Schema
    "CURRENT_VERSION",
    "MIGRATIONS",
    "migrate_state",
    "validate_subscription_record",

    # Plan catalog
    "PLAN_CATALOG",
    "get_plan",
    "list_plans",
]
