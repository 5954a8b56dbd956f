# 📄 File: substore/modules/subscription/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation):
# Sets up how the subscription module actually saves and reads its data.
#
# 🧪 Purpose (Technical Summary):
# Infrastructure layer initialization exposing the key/value implementation of the
# subscription state repository together with its keyspace and envelope codec.
#
# 🔗 Dependencies:
# - substore.modules.subscription.domain.repositories (repository interface)
# - substore.shared.infrastructure.storage (key/value backends)
#
# 🔄 Connected Modules / Calls From:
# - substore.modules.subscription.domain.services (store service)
# - Main application startup

"""
Subscription Infrastructure Layer

Infrastructure Components:
- Persistence: versioned keyspace, JSON envelope codec, KeyValueStateRepository
"""

from .persistence import KeyValueStateRepository, StorageKeyspace

__all__ = [
    "KeyValueStateRepository",
    "StorageKeyspace",
]
