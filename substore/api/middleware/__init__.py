# 📄 File: substore/api/middleware/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes the helpers that look at every web request on its way in and out, such as logging.
# 🧪 Purpose (Technical Summary):
# Package initialization for API middleware components with per-middleware configuration and
# path exclusion helpers.
# 🔗 Dependencies:
# typing
# 🔄 Connected Modules / Calls From:
# substore.main (middleware registration), substore.api.middleware.logging

"""
Subscription Store API Middleware Package

Middleware Components:
    - RequestLoggingMiddleware: HTTP request and response logging with request ids

Usage:
    from substore.api.middleware.logging import RequestLoggingMiddleware

    app.add_middleware(RequestLoggingMiddleware)
"""

from typing import Any, Dict

MIDDLEWARE_CONFIG = {
    "logging": {
        "enabled": True,
        "exclude_paths": ["/docs", "/redoc", "/openapi.json", "/favicon.ico"],
        "slow_request_threshold": 2.0,
    },
}


def get_middleware_config(middleware_name: str) -> Dict[str, Any]:
    """
    Get configuration for a specific middleware

    Args:
        middleware_name: Name of the middleware

    Returns:
        Middleware configuration dictionary (empty if unknown)
    """
    return MIDDLEWARE_CONFIG.get(middleware_name, {})


def should_exclude_path(middleware_name: str, path: str) -> bool:
    """
    Check if a path should be excluded from middleware processing

    Args:
        middleware_name: Name of the middleware
        path: Request path to check

    Returns:
        True if path should be excluded, False otherwise
    """
    config = get_middleware_config(middleware_name)
    exclude_paths = config.get("exclude_paths", [])

    # Check for exact matches and prefix matches
    for exclude_path in exclude_paths:
        if path == exclude_path or path.startswith(exclude_path + "/"):
            return True

    return False


__all__ = [
    "MIDDLEWARE_CONFIG",
    "get_middleware_config",
    "should_exclude_path",
]
