"""
Data Models Package

This package contains all Pydantic models used in Finance Tracker.
Everything the engine stores or the query layer returns is defined here.
"""

from finance_tracker.models.ledger import (
    Account,
    AccountRole,
    AccountType,
    Debt,
    DebtStatus,
    Goal,
    LedgerSnapshot,
    Transaction,
    TransactionType,
    new_id,
)
from finance_tracker.models.reports import (
    CategoryTotal,
    DailyCashflow,
    DashboardSummary,
    GoalProgress,
    MonthDebtSummary,
    MonthlyCashflow,
)
from finance_tracker.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Ledger entities
    "Account",
    "AccountRole",
    "AccountType",
    "Debt",
    "DebtStatus",
    "Goal",
    "LedgerSnapshot",
    "Transaction",
    "TransactionType",
    "new_id",
    # Reports
    "CategoryTotal",
    "DailyCashflow",
    "DashboardSummary",
    "GoalProgress",
    "MonthDebtSummary",
    "MonthlyCashflow",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
