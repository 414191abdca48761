"""Shared utilities for archdecide."""

from archdecide.core.utils.datetime_utils import (
    utc_now,
    format_iso,
    parse_calendar_date,
    format_calendar_date,
)

__all__ = [
    "utc_now",
    "format_iso",
    "parse_calendar_date",
    "format_calendar_date",
]
