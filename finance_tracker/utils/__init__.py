"""Small shared helpers."""

from finance_tracker.utils.dates import (
    local_date,
    month_days,
    parse_timestamp,
    same_month,
    to_local,
)
from finance_tracker.utils.decimal_utils import coerce_decimal

__all__ = [
    "coerce_decimal",
    "local_date",
    "month_days",
    "parse_timestamp",
    "same_month",
    "to_local",
]
