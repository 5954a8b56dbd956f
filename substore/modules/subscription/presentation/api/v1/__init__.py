# 📄 File: substore/modules/subscription/presentation/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# Keeps version 1 of the subscription web endpoints together in one place.
#
# 🧪 Purpose (Technical Summary):
# API version 1 initialization exporting the subscription router and its OpenAPI tag metadata.
#
# 🔗 Dependencies:
# - FastAPI APIRouter
# - subscription.py (endpoints)
#
# 🔄 Connected Modules / Calls From:
# - substore.api.v1.router (router inclusion)

"""
Subscription API Version 1

- Subscription API (/subscription): snapshot, plans, subscribe, cancel,
  change plan, payment methods, transactions, health
"""

from .subscription import subscription_router

__all__ = [
    "subscription_router",
    "API_TAGS_METADATA",
]

API_TAGS_METADATA = [
    {
        "name": "Subscription",
        "description": "Subscription plan, billing and payment method endpoints",
    },
]
