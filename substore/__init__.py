# 📄 File: substore/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this folder holds the subscription store: the part of the app that remembers
# which plan a user is on, their payment methods and billing history.
#
# 🧪 Purpose (Technical Summary):
# Package initialization with version and package metadata for the subscription store service.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - main.py (application entry point)
# - Package imports throughout the application

"""
Subscription Store - Persisted, Versioned Subscription State

A versioned, schema-migrating, retry-capable store for a user's subscription
record (plan, billing cycle, transactions, payment methods) with a FastAPI
facade.
"""

__version__ = "1.0.0"
__title__ = "Subscription Store"
__description__ = "Persisted, schema-migrating subscription state store"
__license__ = "MIT"

# Application metadata
__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__license__",
]
