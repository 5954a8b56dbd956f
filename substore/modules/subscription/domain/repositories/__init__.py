# 📄 File: substore/modules/subscription/domain/repositories/__init__.py
# 🧭 Purpose (Layman Explanation):
# Lists the storage contracts the subscription module relies on
# 🧪 Purpose (Technical Summary):
# Package initialization for repository interfaces of the subscription domain
# 🔗 Dependencies:
# subscription_state_repository.py
# 🔄 Connected Modules / Calls From:
# Domain services, infrastructure implementations

from .subscription_state_repository import StoredState, SubscriptionStateRepository

__all__ = [
    "StoredState",
    "SubscriptionStateRepository",
]
