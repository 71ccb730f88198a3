"""Read-only queries over ledger collections."""

from finance_tracker.queries.cashflow import (
    daily_cashflow,
    expenses_by_category,
    monthly_cashflow,
    reserve_balance,
    spending_balance,
)
from finance_tracker.queries.categories import (
    DEFAULT_CATEGORIES,
    CategoryStyle,
    category_style,
)
from finance_tracker.queries.dashboard import (
    account_name,
    build_dashboard,
    debts_due_in_month,
    featured_goal,
    format_currency,
    goal_progress,
    month_debt_summary,
    recent_transactions,
    sort_debts_for_display,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "CategoryStyle",
    "account_name",
    "build_dashboard",
    "category_style",
    "daily_cashflow",
    "debts_due_in_month",
    "expenses_by_category",
    "featured_goal",
    "format_currency",
    "goal_progress",
    "month_debt_summary",
    "monthly_cashflow",
    "recent_transactions",
    "reserve_balance",
    "sort_debts_for_display",
    "spending_balance",
]
