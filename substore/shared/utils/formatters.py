# 📄 File: substore/shared/utils/formatters.py

# 🧭 Purpose (Layman Explanation):
# Turns dates into the exact text form the saved subscription uses
# (for example "2024-01-01T00:00:00.000Z") and reads them back.

# 🧪 Purpose (Technical Summary):
# ISO-8601 timestamp formatting with millisecond precision and a 'Z' suffix,
# matching the format previously written by the mobile client, plus tolerant parsing.

# 🔗 Dependencies:
# - datetime: Timestamp handling

# 🔄 Connected Modules / Calls From:
# Used by: subscription store (nextBilling, transaction dates), tests

from datetime import datetime, timezone
from typing import Union


class FormattingError(Exception):
    """Exception for formatting errors."""
    pass


def format_iso_timestamp(dt: datetime) -> str:
    """
    Format a datetime as a UTC ISO-8601 string with milliseconds.

    Naive datetimes are taken to be UTC already.

    Args:
        dt: Datetime to format

    Returns:
        String such as '2024-01-01T00:00:00.000Z'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_iso_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO-8601 string (with or without 'Z') into an aware datetime.

    Raises:
        FormattingError: If the string is not a timestamp
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    try:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise FormattingError(f"Unable to parse datetime string: {value}")

    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
