"""
Persistence for the subscription record: versioned keys, JSON envelopes and
the key/value backed state repository.
"""

from .envelope_codec import decode_envelope, encode_envelope
from .keyspace import DEFAULT_KEY_PREFIX, StorageKeyspace
from .state_repository import KeyValueStateRepository

__all__ = [
    "DEFAULT_KEY_PREFIX",
    "StorageKeyspace",
    "encode_envelope",
    "decode_envelope",
    "KeyValueStateRepository",
]
