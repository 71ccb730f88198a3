"""
Dashboard Queries

Read-only projections used by the overview, goals and debts pages.
Like the cashflow queries, every function is pure over the collections
passed in.
"""

import math
from datetime import date, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from finance_tracker.models.ledger import (
    Account,
    Debt,
    DebtStatus,
    Goal,
    LedgerSnapshot,
    Transaction,
)
from finance_tracker.models.reports import (
    DashboardSummary,
    GoalProgress,
    MonthDebtSummary,
)
from finance_tracker.queries.cashflow import (
    MonthRef,
    daily_cashflow,
    expenses_by_category,
    monthly_cashflow,
    reserve_balance,
    spending_balance,
)
from finance_tracker.utils.dates import local_date, same_month, to_local
from finance_tracker.utils.decimal_utils import coerce_decimal


UNKNOWN_ACCOUNT_NAME = "Conta desconhecida"

CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "USD": "US$",
    "EUR": "€",
    "GBP": "£",
}


def account_name(
    accounts: Iterable[Account],
    account_id: Optional[str],
    fallback: str = UNKNOWN_ACCOUNT_NAME,
) -> str:
    """Name of an account, or ``fallback`` for deleted/missing ones."""
    for account in accounts:
        if account.id == account_id:
            return account.name
    return fallback


def debts_due_in_month(
    debts: Iterable[Debt],
    month_ref: MonthRef,
    tz: Optional[tzinfo] = None,
) -> list[Debt]:
    return [debt for debt in debts if same_month(debt.due_date, month_ref, tz)]


def month_debt_summary(
    debts: Iterable[Debt],
    month_ref: MonthRef,
    tz: Optional[tzinfo] = None,
) -> MonthDebtSummary:
    """
    Debts due in a month.

    The total counts every debt due in the month whatever its status, to
    show the month's full burden. next_due is the earliest unpaid one.
    """
    in_month = debts_due_in_month(debts, month_ref, tz)
    total = sum((debt.total_amount for debt in in_month), Decimal("0"))
    unpaid = sorted(
        (debt for debt in in_month if debt.status != DebtStatus.PAID),
        key=lambda debt: to_local(debt.due_date, tz),
    )
    return MonthDebtSummary(
        total=total,
        debts=tuple(in_month),
        next_due=unpaid[0] if unpaid else None,
    )


def sort_debts_for_display(
    debts: Iterable[Debt],
    tz: Optional[tzinfo] = None,
) -> list[Debt]:
    """Overdue debts first, then everything else by due date."""
    return sorted(
        debts,
        key=lambda debt: (debt.status != DebtStatus.OVERDUE, to_local(debt.due_date, tz)),
    )


def recent_transactions(
    transactions: Iterable[Transaction],
    month_ref: MonthRef,
    limit: int = 4,
    tz: Optional[tzinfo] = None,
) -> list[Transaction]:
    """The month's latest transactions by transaction date."""
    in_month = [tx for tx in transactions if same_month(tx.date, month_ref, tz)]
    in_month.sort(key=lambda tx: to_local(tx.date, tz), reverse=True)
    return in_month[:limit]


def featured_goal(goals: Sequence[Goal]) -> Optional[Goal]:
    return goals[0] if goals else None


def goal_progress(
    goal: Goal,
    today: date,
    tz: Optional[tzinfo] = None,
) -> GoalProgress:
    """
    Progress of a goal towards its target and deadline.

    percent is floored and may go past 100; bar_percent is capped at 100.
    days_left counts calendar days and is negative once the deadline passed.
    """
    ratio = goal.current_amount / goal.target_amount * 100
    days_left = (local_date(goal.deadline, tz) - today).days
    return GoalProgress(
        goal_id=goal.id,
        percent=math.floor(ratio),
        bar_percent=min(ratio, Decimal("100")),
        days_left=days_left,
        expired=days_left < 0,
    )


def build_dashboard(
    snapshot: LedgerSnapshot,
    month_ref: MonthRef,
    today: Optional[date] = None,
    palette: Optional[Sequence[str]] = None,
    recent_limit: int = 4,
    tz: Optional[tzinfo] = None,
) -> DashboardSummary:
    """Assemble every overview figure for one month from a snapshot."""
    today = today or date.today()
    goal = featured_goal(snapshot.goals)
    month = local_date(month_ref, tz).replace(day=1)

    return DashboardSummary(
        month=month,
        spending_balance=spending_balance(snapshot.accounts),
        reserve_balance=reserve_balance(snapshot.accounts),
        cashflow=monthly_cashflow(snapshot.transactions, month_ref, tz),
        daily=tuple(daily_cashflow(snapshot.transactions, month_ref, tz)),
        categories=tuple(expenses_by_category(snapshot.transactions, month_ref, palette, tz)),
        debts=month_debt_summary(snapshot.debts, month_ref, tz),
        recent_transactions=tuple(
            recent_transactions(snapshot.transactions, month_ref, recent_limit, tz)
        ),
        featured_goal=goal,
        featured_goal_progress=goal_progress(goal, today, tz) if goal else None,
    )


def format_currency(value: Decimal, currency_code: str = "BRL") -> str:
    """
    Format an amount the pt-BR way.

    >>> format_currency(Decimal("1234.5"))
    'R$ 1.234,50'
    """
    symbol = CURRENCY_SYMBOLS.get(currency_code.upper(), currency_code.upper())
    amount = coerce_decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    digits = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{symbol} {digits}"


__all__ = [
    "UNKNOWN_ACCOUNT_NAME",
    "account_name",
    "build_dashboard",
    "debts_due_in_month",
    "featured_goal",
    "format_currency",
    "goal_progress",
    "month_debt_summary",
    "recent_transactions",
    "sort_debts_for_display",
]
