"""
Centralized date and datetime helpers for archdecide.

Timestamps produced by the tool are always timezone-aware UTC. Decision
dates are plain calendar dates and never carry a timezone.
"""

from datetime import date, datetime, timezone
from typing import Union


def utc_now() -> datetime:
    """
    Get current UTC datetime.

    Returns:
        Current datetime in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def format_iso(dt: datetime) -> str:
    """
    Format datetime as ISO string with 'Z' suffix.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_calendar_date(value: Union[str, date, datetime]) -> date:
    """
    Parse a decision date.

    YAML already turns unquoted ``2026-02-03`` into a ``date``; quoted
    values arrive as strings and may carry a time part, which is dropped.

    Raises:
        ValueError: If the value cannot be read as a calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date format: {value!r}")

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValueError(f"Invalid date format: {text}") from None


def format_calendar_date(value: date) -> str:
    """Format a decision date as YYYY-MM-DD."""
    return value.strftime("%Y-%m-%d")
