# 📄 File: substore/modules/subscription/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes the subscription system: the saved plan, billing dates, payment history and payment
# methods, kept safe across restarts and upgrades
# 🧪 Purpose (Technical Summary):
# Package initialization for the subscription module implementing a layered design: domain
# (models, migrations, store service), infrastructure (versioned key/value persistence) and
# presentation (FastAPI routes)
# 🔗 Dependencies:
# FastAPI, pydantic, substore.shared
# 🔄 Connected Modules / Calls From:
# substore.main, substore.api.v1

"""
Subscription Module

This module handles the persisted subscription state:
- Plan selection and billing cycle
- Cancellation and plan changes
- Payment methods with a single default
- Transaction history

Architecture:
- Domain: Record models, validation, migrations, SubscriptionStore service
- Infrastructure: Versioned keyspace, JSON envelope codec, key/value state repository
- Presentation: API endpoints and request/response schemas
"""

from typing import Any, Dict

# Module metadata
__version__ = "1.0.0"
__module_name__ = "subscription"
__description__ = "Persisted Subscription State Module"

SUBSCRIPTION_MODULE_CONFIG = {
    "version": __version__,
    "module_name": __module_name__,
    "description": __description__,
    "plans": ["basic", "pro", "premium"],
    "billing_cycles": ["monthly", "annual"],
    "payment_method_types": ["card", "paypal"],
}


def get_module_config() -> Dict[str, Any]:
    """
    Get subscription module configuration.

    Returns:
        Module configuration dictionary
    """
    return {**SUBSCRIPTION_MODULE_CONFIG, "plans": list(SUBSCRIPTION_MODULE_CONFIG["plans"])}


def get_module_info() -> Dict[str, str]:
    """
    Get basic module information.

    Returns:
        Module information dictionary
    """
    return {
        "name": __module_name__,
        "version": __version__,
        "description": __description__
    }


__all__ = [
    "__version__",
    "__module_name__",
    "__description__",
    "SUBSCRIPTION_MODULE_CONFIG",
    "get_module_config",
    "get_module_info"
]
