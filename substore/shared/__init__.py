# 📄 File: substore/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a package of common tools every part of the subscription store
# can use, like settings, logging and storage.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package initialization for configuration, infrastructure and cross-cutting
# concerns used by the application modules.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - All application modules importing shared utilities

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management (pydantic-settings)
- Key/value storage backends (memory, Redis, files)
- Exception hierarchy, retry engine and event bus
- Structured logging and formatting helpers
"""

__all__ = []
