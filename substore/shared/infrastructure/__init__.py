"""
Infrastructure layer package for the subscription store.
Provides the key/value storage backends.
"""

__all__ = [
    "storage",
]
