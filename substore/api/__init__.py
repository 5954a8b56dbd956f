# 📄 File: substore/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# Marks the api folder as a package so the app can load its web endpoints and request helpers.
# 🧪 Purpose (Technical Summary):
# Package initialization for the API layer with versioning constants.
# 🔗 Dependencies:
# None (package initialization)
# 🔄 Connected Modules / Calls From:
# substore.main

"""
Subscription Store API Package

Structure:
    api/
    ├── __init__.py          # This file
    ├── middleware/          # Request logging
    └── v1/                  # API version 1
        ├── router.py        # Main v1 router
        └── health.py        # Health check endpoints
"""

# API configuration constants
API_PREFIX = "/api"
CURRENT_VERSION = "v1"
SUPPORTED_VERSIONS = ["v1"]

# API response headers
DEFAULT_HEADERS = {
    "X-API-Version": CURRENT_VERSION,
}

__all__ = [
    "API_PREFIX",
    "CURRENT_VERSION",
    "SUPPORTED_VERSIONS",
    "DEFAULT_HEADERS",
]
