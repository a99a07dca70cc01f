"""
Utility functions for normalizing payroll periods and timestamps.

Month names arrive from clients as free text; they are mapped to a canonical
month index with a fixed English table so parsing never depends on the
server locale.
"""

import unicodedata
from datetime import date, datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from salon_backend.fastapi.core.exceptions import InvalidMonth

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_MONTH_LOOKUP = {}
for _index, _name in enumerate(MONTH_NAMES, start=1):
    _MONTH_LOOKUP[_name.lower()] = _index
    _MONTH_LOOKUP[_name[:3].lower()] = _index
_MONTH_LOOKUP["sept"] = 9


def normalize_month(month: Union[str, int]) -> int:
    """
    Normalize a month given as a name or number to its index (1-12).

    Examples:
        "June" -> 6
        " jun " -> 6
        "06" -> 6
        12 -> 12

    Raises:
        InvalidMonth: If the value does not name a month
    """
    if isinstance(month, bool):
        raise InvalidMonth()

    if isinstance(month, int):
        index = month
    else:
        text = unicodedata.normalize("NFKC", str(month)).strip().lower().rstrip(".")
        if text.isascii() and text.isdigit():
            index = int(text)
        else:
            index = _MONTH_LOOKUP.get(text, 0)

    if not 1 <= index <= 12:
        raise InvalidMonth(f"Unrecognized month: {month!r}")
    return index


def month_name(month: int) -> str:
    """Return the English name of a month index."""
    return MONTH_NAMES[month - 1]


def to_utc_naive(value: datetime) -> datetime:
    """
    Convert a timestamp to naive UTC for storage.

    Naive input is assumed to already be UTC.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def business_date(value: datetime, tz_name: str = "UTC") -> date:
    """Calendar day of a (naive UTC or aware) timestamp in the business timezone."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if tz_name.upper() == "UTC":
        return value.astimezone(timezone.utc).date()
    return value.astimezone(ZoneInfo(tz_name)).date()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month."""
    start = date(year, month, 1)
    if month == 12:
        return start, date(year + 1, 1, 1)
    return start, date(year, month + 1, 1)


def event_time(timestamp: Optional[datetime] = None) -> datetime:
    """Client-supplied event time, or the current UTC time when absent."""
    if timestamp is None:
        return datetime.now(timezone.utc)
    return timestamp


def utcnow_naive() -> datetime:
    """Current time as naive UTC, matching the stored timestamp columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
