# 📄 File: substore/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# A small toolbox used across the store: logging, time formatting and short id generation.

# 🧪 Purpose (Technical Summary):
# Initializes the utilities package with structured logging, ISO-8601 timestamp formatting and
# identifier helpers.

# 🔗 Dependencies:
# - logging.py: Structured logging utilities
# - formatters.py: Timestamp formatting
# - helpers.py: Id generation and clock

# 🔄 Connected Modules / Calls From:
# Used by: All application modules

"""
Shared Utilities Package

- Structured logging with JSON formatting
- ISO-8601 timestamp formatting
- Short id generation and the default UTC clock
"""

from .formatters import FormattingError, format_iso_timestamp, parse_iso_timestamp
from .helpers import ID_ALPHABET, generate_id, utc_now
from .logging import get_logger, log_context, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "log_context",
    "format_iso_timestamp",
    "parse_iso_timestamp",
    "FormattingError",
    "generate_id",
    "utc_now",
    "ID_ALPHABET",
]
