# 📄 File: substore/modules/subscription/domain/services/__init__.py
# 🧭 Purpose (Layman Explanation):
# Holds the service that loads, saves and changes the user's subscription
# 🧪 Purpose (Technical Summary):
# Package initialization for domain services of the subscription module
# 🔗 Dependencies:
# subscription_store.py
# 🔄 Connected Modules / Calls From:
# substore.main, presentation layer

"""
Subscription Domain Services

Domain Services:
- SubscriptionStore: persisted, versioned subscription record with retrying I/O,
  schema migration on load and change notification
"""

from .subscription_store import LoadState, StorageFailure, SubscriptionStore

__all__ = [
    "SubscriptionStore",
    "LoadState",
    "StorageFailure",
]
