"""
Report Models

Value objects returned by the query layer. They are computed on demand
from a ledger snapshot and never persisted.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_tracker.models.ledger import Debt, Goal, Transaction


class MonthlyCashflow(BaseModel):
    """Income and expense totals for one calendar month (transfers excluded)."""

    model_config = ConfigDict(frozen=True)

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        """Return income minus expense."""
        return self.income - self.expense


class DailyCashflow(BaseModel):
    """Income and expense totals for one calendar day."""

    model_config = ConfigDict(frozen=True)

    day: date
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def label(self) -> str:
        """Two-digit day of month, as shown on the chart axis."""
        return self.day.strftime("%d")


class CategoryTotal(BaseModel):
    """Expense total for one category, with its chart color."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Decimal
    color: str


class GoalProgress(BaseModel):
    """How far a goal is from its target and its deadline."""

    model_config = ConfigDict(frozen=True)

    goal_id: str
    percent: int = Field(..., description="Floored percentage, may exceed 100")
    bar_percent: Decimal = Field(..., description="Percentage capped at 100 for bars")
    days_left: int
    expired: bool


class MonthDebtSummary(BaseModel):
    """Debts falling due in one month."""

    model_config = ConfigDict(frozen=True)

    total: Decimal = Decimal("0")
    debts: tuple[Debt, ...] = ()
    next_due: Optional[Debt] = None


class DashboardSummary(BaseModel):
    """Everything the overview page needs for one month."""

    model_config = ConfigDict(frozen=True)

    month: date
    spending_balance: Decimal
    reserve_balance: Decimal
    cashflow: MonthlyCashflow
    daily: tuple[DailyCashflow, ...]
    categories: tuple[CategoryTotal, ...]
    debts: MonthDebtSummary
    recent_transactions: tuple[Transaction, ...]
    featured_goal: Optional[Goal] = None
    featured_goal_progress: Optional[GoalProgress] = None
