# 📄 File: substore/shared/utils/helpers.py

# 🧭 Purpose (Layman Explanation):
# Small helpful tools used across the store, like making short random ids for
# payment methods and transactions, and reading the current time.

# 🧪 Purpose (Technical Summary):
# General purpose utility functions for identifier generation and the default
# UTC clock used where no clock is injected.

# 🔗 Dependencies:
# - secrets: Secure random generation
# - string: Alphabet constants

# 🔄 Connected Modules / Calls From:
# Used by: subscription store (new payment methods and transactions)

import secrets
import string
from datetime import datetime, timezone

# Lower-case base36 alphabet for short ids
ID_ALPHABET = string.digits + string.ascii_lowercase
SHORT_ID_LENGTH = 9


def generate_id(prefix: str = "", length: int = SHORT_ID_LENGTH) -> str:
    """
    Generate a short random identifier with optional prefix.

    Args:
        prefix: Optional prefix for the ID
        length: Length of the random part

    Returns:
        Generated identifier
    """
    random_part = "".join(secrets.choice(ID_ALPHABET) for _ in range(length))
    if prefix:
        return f"{prefix}_{random_part}"
    return random_part


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
