"""
Debt Status Resolver

Promotes unpaid debts to OVERDUE once their due date is behind us.

The rule compares calendar dates only: a debt due today is not overdue,
a debt due yesterday is. PAID debts are never looked at again, and an
OVERDUE debt never goes back to PENDING. Both properties make the pass
idempotent, so it can run at load time and again whenever the caller
likes.
"""

from datetime import date, tzinfo
from typing import Iterable, Optional

from finance_tracker.models.ledger import Debt, DebtStatus
from finance_tracker.utils.dates import local_date


def is_overdue(debt: Debt, today: date, tz: Optional[tzinfo] = None) -> bool:
    """True if the debt is unpaid and its due date is strictly before today."""
    if debt.status == DebtStatus.PAID:
        return False
    return local_date(debt.due_date, tz) < today


def resolve_debt_statuses(
    debts: Iterable[Debt],
    today: date,
    tz: Optional[tzinfo] = None,
) -> list[Debt]:
    """
    Return the debts with overdue ones promoted, in the same order.

    Unchanged debts are returned as the same objects, so callers can spot
    what changed with an identity check.
    """
    resolved = []
    for debt in debts:
        if debt.status == DebtStatus.PENDING and is_overdue(debt, today, tz):
            debt = debt.model_copy(update={"status": DebtStatus.OVERDUE})
        resolved.append(debt)
    return resolved
