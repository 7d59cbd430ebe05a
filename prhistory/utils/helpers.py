"""
Shared Utility Functions

Common helper functions used across multiple modules.
"""

from datetime import date, datetime, time, timezone
from typing import Optional, Union


def ensure_utc(value: Optional[Union[datetime, date]]) -> Optional[datetime]:
    """
    Coerce a date or datetime to a timezone-aware UTC datetime.

    - date → midnight UTC of that day
    - naive datetime → same wall time, UTC
    - aware datetime → converted to UTC
    - None → None
    """
    if value is None:
        return None
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_since(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a `since` bound given as 'YYYY-MM-DD' or an ISO 8601 timestamp.

    Args:
        value: Date or timestamp string; empty/None means no bound

    Returns:
        UTC datetime or None

    Raises:
        ValueError: If the string is not a valid date or timestamp
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if len(text) == 10:
        return ensure_utc(date.fromisoformat(text))
    return ensure_utc(datetime.fromisoformat(text))
