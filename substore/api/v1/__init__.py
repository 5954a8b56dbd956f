# 📄 File: substore/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes version 1 of the subscription store's web API so later versions can be added
# without breaking existing clients.
# 🧪 Purpose (Technical Summary):
# Package initialization for API version 1, providing version metadata, route prefixes and
# tag configuration used by the v1 router aggregation.
# 🔗 Dependencies:
# typing
# 🔄 Connected Modules / Calls From:
# substore.api.v1.router, substore.main

"""
Subscription Store API Version 1

Structure:
    v1/
    ├── __init__.py          # This file
    ├── router.py            # Main v1 router aggregation
    └── health.py            # Service health endpoints

Module routers:
    /subscription            # substore.modules.subscription.presentation.api.v1
"""

from typing import Any, Dict

# API v1 metadata
__version__ = "1.0.0"
__api_version__ = "v1"
__status__ = "stable"

API_V1_CONFIG = {
    "version": __version__,
    "api_version": __api_version__,
    "status": __status__,
    "description": "Subscription Store API Version 1",
    "features": [
        "subscription_state",
        "plan_catalog",
        "payment_methods",
        "transaction_history",
    ],
}

ROUTE_PREFIXES = {
    "subscription": "/subscription",
}

API_TAGS = {
    "subscription": "Subscription",
    "health": "Health Check",
}


def get_api_info() -> Dict[str, Any]:
    """
    Get API v1 information and configuration

    Returns:
        Dictionary with API v1 metadata and route configuration
    """
    return {
        "api_info": API_V1_CONFIG,
        "route_prefixes": ROUTE_PREFIXES,
        "tags": API_TAGS,
    }


__all__ = [
    "API_V1_CONFIG",
    "ROUTE_PREFIXES",
    "API_TAGS",
    "get_api_info",
]
