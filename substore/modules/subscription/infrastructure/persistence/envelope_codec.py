# 📄 File: substore/modules/subscription/infrastructure/persistence/envelope_codec.py
# 🧭 Purpose (Layman Explanation):
# Turns the saved subscription into text bytes for storage and back again, and flags stored data
# that can no longer be read.
# 🧪 Purpose (Technical Summary):
# JSON UTF-8 codec for storage envelopes. Decoding failures and non-object payloads raise
# CorruptStateError, a permanent storage error.
# 🔗 Dependencies:
# json, substore.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# infrastructure/persistence/state_repository.py

import json
from typing import Any, Dict

from substore.shared.core.exceptions import CorruptStateError


def encode_envelope(envelope: Dict[str, Any]) -> bytes:
    """
    Serialize an envelope to compact JSON bytes.

    Args:
        envelope: Dict with "version" and "data"

    Returns:
        bytes: UTF-8 encoded JSON
    """
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def decode_envelope(payload: bytes, key: str = "") -> Dict[str, Any]:
    """
    Parse stored bytes back into an envelope dict.

    Args:
        payload: Bytes read from storage
        key: Storage key, used in error details

    Returns:
        Dict: Decoded JSON object

    Raises:
        CorruptStateError: If the bytes are not UTF-8 JSON or not a JSON object
    """
    try:
        value = json.loads(payload.decode("utf-8") if isinstance(payload, (bytes, bytearray)) else payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptStateError(f"Failed to parse subscription state: {e}", key=key) from e

    if not isinstance(value, dict):
        raise CorruptStateError(
            f"Failed to parse subscription state: expected an object, got {type(value).__name__}",
            key=key,
        )
    return value
