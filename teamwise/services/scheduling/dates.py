"""
Date utilities for the scheduling core.
All helpers are total: invalid input yields None (or an empty list), never an exception.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, str, None]


def parse_iso_date(value: DateLike) -> Optional[date]:
    """Coerce a date, datetime or 'YYYY-MM-DD' string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def dow_index(value: DateLike) -> Optional[int]:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return None
    return (parsed.weekday() + 1) % 7


def weekend_saturday(value: DateLike) -> Optional[date]:
    """Saturday of the weekend containing the date, or None on weekdays."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return None
    dow = dow_index(parsed)
    if dow == 6:
        return parsed
    if dow == 0:
        return parsed - timedelta(days=1)
    return None


def build_date_range(start: DateLike, end: DateLike) -> list[date]:
    """Inclusive list of dates; empty when either bound is invalid or start > end."""
    start_date = parse_iso_date(start)
    end_date = parse_iso_date(end)
    if start_date is None or end_date is None or start_date > end_date:
        return []
    return [start_date + timedelta(days=i) for i in range((end_date - start_date).days + 1)]
