"""
Versioned storage keys for the subscription envelope.

Each schema version has its own key, ``<prefix><version>``. Loading checks the
current key first and then older ones, newest first; after a successful save
only the current key remains.
"""

from dataclasses import dataclass
from typing import List, Tuple

DEFAULT_KEY_PREFIX = "@subscription_state_v"


@dataclass(frozen=True)
class StorageKeyspace:
    """Ordered ``(version, key)`` pairs for versions ``current_version`` down to 0."""
    prefix: str = DEFAULT_KEY_PREFIX
    current_version: int = 1

    def __post_init__(self):
        if self.current_version < 0:
            raise ValueError("current_version must be non-negative")
        if not self.prefix:
            raise ValueError("prefix must not be empty")

    def key_for(self, version: int) -> str:
        return f"{self.prefix}{version}"

    @property
    def current_key(self) -> str:
        return self.key_for(self.current_version)

    def search_order(self) -> List[Tuple[int, str]]:
        """Keys to probe on load, current version first."""
        return [(version, self.key_for(version)) for version in range(self.current_version, -1, -1)]

    def legacy_keys(self) -> List[str]:
        """Every key except the current one, newest first."""
        return [key for version, key in self.search_order() if version != self.current_version]
