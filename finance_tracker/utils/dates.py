"""
Date helpers.

Stored timestamps may be timezone-aware (the web app wrote UTC with a
trailing ``Z``) or naive. Calendar questions (same month? same day?
past due?) are always answered on the local wall-clock date.
"""

import calendar
from datetime import date, datetime, time, tzinfo
from typing import Optional, Union


DateLike = Union[datetime, date, str]


def parse_timestamp(value: DateLike) -> datetime:
    """
    Parse a datetime, date or ISO-8601 string into a datetime.

    Plain dates become midnight of that day.

    Raises:
        ValueError: If the string is not ISO-8601.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}")
    raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")


def to_local(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Return a naive wall-clock datetime in ``tz`` (system local if None)."""
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def local_date(value: Union[datetime, date], tz: Optional[tzinfo] = None) -> date:
    """Calendar date of a timestamp in the local timezone."""
    if isinstance(value, datetime):
        return to_local(value, tz).date()
    return value


def same_month(
    value: Union[datetime, date],
    month_ref: Union[datetime, date],
    tz: Optional[tzinfo] = None,
) -> bool:
    day = local_date(value, tz)
    ref = local_date(month_ref, tz)
    return day.year == ref.year and day.month == ref.month


def month_days(month_ref: Union[datetime, date], tz: Optional[tzinfo] = None) -> list[date]:
    """Every calendar day of ``month_ref``'s month, first to last."""
    ref = local_date(month_ref, tz)
    _, last = calendar.monthrange(ref.year, ref.month)
    return [date(ref.year, ref.month, d) for d in range(1, last + 1)]
