# 📄 File: substore/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell the subscription store where to save data,
# how many times to retry, and how chatty its logs should be.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization with exports for settings management
# and Redis connection configuration.
#
# 🔗 Dependencies:
# - settings.py (application settings)
# - redis.py (Redis connection configuration)
#
# 🔄 Connected Modules / Calls From:
# - substore.main (application startup)
# - Storage backends and logging setup

"""
Configuration Management Package

Handles all application configuration including:
- Environment-based settings
- Storage backend selection and key layout
- Retry/backoff tuning for the subscription store
- Redis connection configuration
"""

from .settings import get_settings, Settings
from .redis import RedisConfig

__all__ = [
    "get_settings",
    "Settings",
    "RedisConfig",
]
