"""Timestamp normalization utilities for UniFi API data."""

from datetime import datetime, timezone
from typing import Any

from dateutil import parser as dateutil_parser


def normalize_timestamp(
    value: Any,
    assume_utc: bool = True,
) -> datetime:
    """Convert various timestamp formats to UTC datetime.

    Handles:
    - int/float: Unix timestamp (auto-detects milliseconds vs seconds)
    - str: ISO format or other parseable formats via dateutil
    - datetime: Returns as-is if aware, converts if naive

    Args:
        value: Timestamp as int (ms or s), float, str, or datetime
        assume_utc: If True, treat naive timestamps as UTC (default True)

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If value cannot be parsed as a timestamp

    Example:
        >>> normalize_timestamp(1705084800)  # station last_seen, seconds
        datetime.datetime(2024, 1, 12, 18, 40, tzinfo=datetime.timezone.utc)
        >>> normalize_timestamp("2024-01-12T20:00:00Z")
        datetime.datetime(2024, 1, 12, 20, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse timestamp: {value!r} (type: bool)")

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        # Some controller fields are milliseconds; > 1e12 is past 2001 in ms
        if value > 1e12:
            value = value / 1000
        return datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        dt = dateutil_parser.parse(value)
    else:
        raise ValueError(f"Cannot parse timestamp: {value!r} (type: {type(value).__name__})")

    if dt.tzinfo is None:
        if assume_utc:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt
