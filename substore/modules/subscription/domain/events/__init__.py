# 📄 File: substore/modules/subscription/domain/events/__init__.py
# 🧭 Purpose (Layman Explanation):
# Groups the notifications sent when the saved subscription loads, changes or fails to save
# 🧪 Purpose (Technical Summary):
# Package initialization re-exporting subscription event types, factories and handlers
# 🔗 Dependencies:
# subscription_events.py, handlers.py
# 🔄 Connected Modules / Calls From:
# services/subscription_store.py, substore.main

"""
Subscription Domain Events

Domain Events:
- subscription.loaded: load() finished with a valid record
- subscription.degraded: load() failed, default record in use
- subscription.changed: a mutation was persisted
- subscription.storage_error: a save exhausted its retries

Event Handlers:
- SubscriptionAuditHandler: structured log line per event
"""

from .subscription_events import (
    SUBSCRIPTION_CHANGED,
    SUBSCRIPTION_DEGRADED,
    SUBSCRIPTION_EVENT_TYPES,
    SUBSCRIPTION_LOADED,
    SUBSCRIPTION_STORAGE_ERROR,
    subscription_changed,
    subscription_degraded,
    subscription_loaded,
    subscription_storage_error,
)
from .handlers import SubscriptionAuditHandler

__all__ = [
    # Event types
    "SUBSCRIPTION_LOADED",
    "SUBSCRIPTION_DEGRADED",
    "SUBSCRIPTION_CHANGED",
    "SUBSCRIPTION_STORAGE_ERROR",
    "SUBSCRIPTION_EVENT_TYPES",

    # Factories
    "subscription_loaded",
    "subscription_degraded",
    "subscription_changed",
    "subscription_storage_error",

    # Handlers
    "SubscriptionAuditHandler",
]
