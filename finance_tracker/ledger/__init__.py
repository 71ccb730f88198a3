"""Ledger engine package."""

from finance_tracker.ledger.debt_status import is_overdue, resolve_debt_statuses
from finance_tracker.ledger.engine import (
    COLLECTIONS,
    DEFAULT_SLOTS,
    InvalidArgumentError,
    LedgerEngine,
    LedgerError,
    balance_deltas,
)

__all__ = [
    "COLLECTIONS",
    "DEFAULT_SLOTS",
    "InvalidArgumentError",
    "LedgerEngine",
    "LedgerError",
    "balance_deltas",
    "is_overdue",
    "resolve_debt_statuses",
]
