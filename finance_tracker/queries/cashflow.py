"""
Balance and Cashflow Queries

DESIGN DECISION: Every function here is pure. It takes the collections it
needs as arguments and returns a fresh value object; nothing reads engine
state implicitly. The engine's convenience methods just pass their
current collections in.

Transfers move money between the user's own accounts, so they never count
as income or expense in any cashflow figure.
"""

from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from finance_tracker.config.settings import DEFAULT_CATEGORY_PALETTE
from finance_tracker.models.ledger import (
    Account,
    AccountRole,
    Transaction,
    TransactionType,
)
from finance_tracker.models.reports import (
    CategoryTotal,
    DailyCashflow,
    MonthlyCashflow,
)
from finance_tracker.utils.dates import local_date, month_days, same_month


MonthRef = Union[date, datetime]

DEFAULT_PALETTE = tuple(DEFAULT_CATEGORY_PALETTE.split(","))


def _role_balance(accounts: Iterable[Account], role: AccountRole) -> Decimal:
    return sum(
        (account.balance for account in accounts if account.role == role),
        Decimal("0"),
    )


def spending_balance(accounts: Iterable[Account]) -> Decimal:
    """Sum of balances over spending accounts."""
    return _role_balance(accounts, AccountRole.SPENDING)


def reserve_balance(accounts: Iterable[Account]) -> Decimal:
    """Sum of balances over reserve accounts."""
    return _role_balance(accounts, AccountRole.RESERVE)


def _totals(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    income = Decimal("0")
    expense = Decimal("0")
    for tx in transactions:
        if tx.type == TransactionType.INCOME:
            income += tx.amount
        elif tx.type == TransactionType.EXPENSE:
            expense += tx.amount
    return income, expense


def monthly_cashflow(
    transactions: Iterable[Transaction],
    month_ref: MonthRef,
    tz: Optional[tzinfo] = None,
) -> MonthlyCashflow:
    """
    Income and expense for the calendar month containing ``month_ref``.

    Args:
        transactions: Any sequence of transactions
        month_ref: Any date or datetime inside the wanted month
        tz: Timezone used to place aware timestamps on a calendar day

    Returns:
        MonthlyCashflow with income, expense and balance (income - expense)
    """
    in_month = [tx for tx in transactions if same_month(tx.date, month_ref, tz)]
    income, expense = _totals(in_month)
    return MonthlyCashflow(income=income, expense=expense)


def daily_cashflow(
    transactions: Iterable[Transaction],
    month_ref: MonthRef,
    tz: Optional[tzinfo] = None,
) -> list[DailyCashflow]:
    """
    Income and expense per day for the month containing ``month_ref``.

    Returns one entry for every calendar day of the month, in ascending
    order, including days without any movement.
    """
    days = month_days(month_ref, tz)
    income_by_day = {day: Decimal("0") for day in days}
    expense_by_day = {day: Decimal("0") for day in days}

    for tx in transactions:
        day = local_date(tx.date, tz)
        if day not in income_by_day:
            continue
        if tx.type == TransactionType.INCOME:
            income_by_day[day] += tx.amount
        elif tx.type == TransactionType.EXPENSE:
            expense_by_day[day] += tx.amount

    return [
        DailyCashflow(day=day, income=income_by_day[day], expense=expense_by_day[day])
        for day in days
    ]


def expenses_by_category(
    transactions: Iterable[Transaction],
    month_ref: MonthRef,
    palette: Optional[Sequence[str]] = None,
    tz: Optional[tzinfo] = None,
) -> list[CategoryTotal]:
    """
    Expense totals per category for one month, largest first.

    Categories with equal totals keep the order in which they were first
    seen in ``transactions``. Colors are taken from ``palette`` by output
    position, cycling when there are more categories than colors.
    """
    colors = list(palette) if palette else list(DEFAULT_PALETTE)

    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if tx.type != TransactionType.EXPENSE:
            continue
        if not same_month(tx.date, month_ref, tz):
            continue
        totals[tx.category] = totals.get(tx.category, Decimal("0")) + tx.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)

    return [
        CategoryTotal(name=name, value=value, color=colors[index % len(colors)])
        for index, (name, value) in enumerate(ranked)
    ]
