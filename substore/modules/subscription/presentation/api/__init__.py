# 📄 File: substore/modules/subscription/presentation/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes the web endpoints of the subscription module.
#
# 🧪 Purpose (Technical Summary):
# API package initialization providing the versioned subscription routers.
#
# 🔗 Dependencies:
# - substore.modules.subscription.presentation.api.v1
#
# 🔄 Connected Modules / Calls From:
# - substore.api.v1.router

"""
Subscription API

API Structure:
- Version 1 (/api/v1)
  - Subscription (/subscription)
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from substore.modules.subscription.presentation.api.v1.subscription import subscription_router

__all__ = [
    "subscription_router",
]
