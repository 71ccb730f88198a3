"""
Activity Logger

DESIGN DECISION: Every ledger mutation emits one structured log line.
This provides:
1. Debugging capability when a balance looks wrong
2. A readable trail of what the engine did during a session

Logging is local only. Nothing here is persisted and nothing here is an
accounting audit trail: the ledger data itself lives in the slot store.

The activity logger never raises: a failing log call must not interrupt a
ledger operation that has already been committed.
"""

import logging
from decimal import Decimal
from typing import Optional

import structlog

from finance_tracker.models.ledger import Account, Debt, Goal, Transaction
from finance_tracker.models.validation import ValidationResult


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_log_level(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at ``level``."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))
    logging.getLogger("finance_tracker").setLevel(getattr(logging, level.upper()))


def _money(value: Decimal) -> str:
    return str(value)


class ActivityLogger:
    """
    Structured log of ledger activity.

    One method per event so call sites stay short and event names stay
    consistent.
    """

    def __init__(self, logger_name: str = "finance_tracker.ledger"):
        self._logger = structlog.get_logger(logger_name)

    def _emit(self, level: str, event: str, **fields) -> None:
        try:
            getattr(self._logger, level)(event, **fields)
        except Exception:
            # Log failure but don't raise
            logging.getLogger(__name__).exception("activity log call failed: %s", event)

    # -- accounts ----------------------------------------------------------

    def account_added(self, account: Account) -> None:
        self._emit(
            "info",
            "account_added",
            account_id=account.id,
            name=account.name,
            role=account.role.value,
            balance=_money(account.balance),
        )

    def account_deleted(self, account_id: str) -> None:
        self._emit("info", "account_deleted", account_id=account_id)

    # -- transactions ------------------------------------------------------

    def transaction_added(
        self,
        transaction: Transaction,
        funded_goal_ids: Optional[list[str]] = None,
    ) -> None:
        self._emit(
            "info",
            "transaction_added",
            transaction_id=transaction.id,
            type=transaction.type.value,
            amount=_money(transaction.amount),
            account_id=transaction.account_id,
            related_account_id=transaction.related_account_id,
            funded_goal_ids=funded_goal_ids or [],
        )

    def transaction_deleted(self, transaction: Transaction) -> None:
        self._emit(
            "info",
            "transaction_deleted",
            transaction_id=transaction.id,
            type=transaction.type.value,
            amount=_money(transaction.amount),
        )

    # -- goals -------------------------------------------------------------

    def goal_added(self, goal: Goal) -> None:
        self._emit(
            "info",
            "goal_added",
            goal_id=goal.id,
            name=goal.name,
            linked_account_id=goal.linked_reserve_account_id,
            current_amount=_money(goal.current_amount),
        )

    def goal_updated(self, goal: Goal) -> None:
        self._emit(
            "info",
            "goal_updated",
            goal_id=goal.id,
            current_amount=_money(goal.current_amount),
        )

    def goal_deleted(self, goal_id: str) -> None:
        self._emit("info", "goal_deleted", goal_id=goal_id)

    # -- debts -------------------------------------------------------------

    def debt_added(self, debt: Debt) -> None:
        self._emit(
            "info",
            "debt_added",
            debt_id=debt.id,
            name=debt.name,
            total_amount=_money(debt.total_amount),
            due_date=debt.due_date.isoformat(),
        )

    def debt_paid(self, debt: Debt, transaction: Transaction) -> None:
        self._emit(
            "info",
            "debt_paid",
            debt_id=debt.id,
            transaction_id=transaction.id,
            account_id=transaction.account_id,
            amount=_money(transaction.amount),
        )

    def debt_deleted(self, debt_id: str) -> None:
        self._emit("info", "debt_deleted", debt_id=debt_id)

    def debts_reconciled(self, overdue_ids: list[str]) -> None:
        self._emit("info", "debts_reconciled", overdue_ids=overdue_ids, count=len(overdue_ids))

    # -- problems ----------------------------------------------------------

    def validation_warning(self, result: ValidationResult) -> None:
        self._emit(
            "warning",
            "validation_warning",
            command=result.command,
            warnings=result.warnings,
        )

    def slot_load_failed(self, slot: str, error: str) -> None:
        self._emit("warning", "slot_load_failed", slot=slot, error=error)

    def record_skipped(self, slot: str, index: int, error: str) -> None:
        self._emit("warning", "record_skipped", slot=slot, index=index, error=error)

    def flush_failed(self, slot: str, error: str) -> None:
        self._emit("error", "flush_failed", slot=slot, error=error)
