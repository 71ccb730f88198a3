"""
Ledger Engine

The only component allowed to change balances. It owns four collections
(accounts, transactions, goals, debts), applies commands to them and
flushes every changed collection to the slot store.

DESIGN DECISION: Every operation runs in three steps.
1. Validate the command (nothing has been touched yet)
2. Stage: build new copies of every affected collection
3. Commit: swap all staged collections in with one dict update, then flush

A command that fails in step 1 or 2 leaves the ledger exactly as it was.
This is what makes pay_debt safe: the payment transaction and the status
flip are staged together and land together, or not at all.

Balance rules:
- income:   account += amount
- expense:  account -= amount
- transfer: source -= amount, destination += amount; every goal linked to
            the destination also gains amount
Deleting a transaction applies the exact inverse to the accounts. It does
NOT take back what a transfer added to a goal.

References are never cascaded: deleting an account leaves its transactions
and goals pointing at an id that no longer exists.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Type

from pydantic import ValidationError

from finance_tracker.activity import ActivityLogger
from finance_tracker.config import LedgerSettings, get_settings
from finance_tracker.ledger.debt_status import resolve_debt_statuses
from finance_tracker.models.ledger import (
    Account,
    Debt,
    DebtStatus,
    Goal,
    LedgerModel,
    LedgerSnapshot,
    Transaction,
    TransactionType,
)
from finance_tracker.models.reports import (
    CategoryTotal,
    DailyCashflow,
    DashboardSummary,
    MonthlyCashflow,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.queries import cashflow, dashboard
from finance_tracker.services.storage import KeyValueStore, StorageError
from finance_tracker.utils.dates import local_date
from finance_tracker.validation import LedgerValidator


COLLECTIONS = ("accounts", "transactions", "goals", "debts")

_ENTITY_TYPES: dict[str, Type[LedgerModel]] = {
    "accounts": Account,
    "transactions": Transaction,
    "goals": Goal,
    "debts": Debt,
}

DEFAULT_SLOTS = {
    "accounts": "@finance:accounts",
    "transactions": "@finance:transactions",
    "goals": "@finance:goals",
    "debts": "@finance:debts",
}


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvalidArgumentError(LedgerError):
    """A command was rejected before anything was applied."""

    def __init__(self, result: ValidationResult):
        self.result = result
        self.issues = result.issues
        details = "; ".join(
            f"{issue.field}: {issue.message}"
            for issue in result.issues
            if issue.severity == "error"
        )
        super().__init__(f"{result.command} rejected: {details}")


def balance_deltas(tx: Transaction) -> list[tuple[str, Decimal]]:
    """Signed balance changes a transaction applies, per account id."""
    if tx.type == TransactionType.INCOME:
        return [(tx.account_id, tx.amount)]
    if tx.type == TransactionType.EXPENSE:
        return [(tx.account_id, -tx.amount)]
    return [(tx.account_id, -tx.amount), (tx.related_account_id, tx.amount)]


class LedgerEngine:
    """
    In-memory ledger state plus the commands that change it.

    Collections are kept in creation order. Accounts, goals and debts are
    exposed oldest first; transactions newest first (and stored that way).

    Usage:
        engine = LedgerEngine(JsonFileStore(Path("data"))).load()
        checking = engine.add_account("Nubank", "bank", "spending", "#a855f7", 100)
        engine.add_transaction(checking.id, "expense", "25.90", "Alimentação",
                               "2024-05-03", "Almoço")
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[LedgerSettings] = None,
        slots: Optional[dict[str, str]] = None,
        validator: Optional[LedgerValidator] = None,
        activity: Optional[ActivityLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            store: Slot store the collections are loaded from and flushed to
            settings: Ledger settings (defaults to the environment)
            slots: Collection name -> slot name (defaults to the standard slots)
            validator: Command validator
            activity: Structured activity logger
            clock: Returns "now"; used for debt payments and reconciliation
        """
        self._store = store
        self._settings = settings or get_settings().ledger
        self._slots = dict(DEFAULT_SLOTS)
        if slots:
            self._slots.update(slots)
        self._validator = validator or LedgerValidator()
        self._activity = activity or ActivityLogger()
        self._tz = self._settings.tzinfo
        self._clock = clock or self._default_clock
        self._state: dict[str, dict[str, LedgerModel]] = {name: {} for name in COLLECTIONS}
        self._rejected: dict[str, list] = {name: [] for name in COLLECTIONS}

    def _default_clock(self) -> datetime:
        return datetime.now(self._tz) if self._tz else datetime.now()

    # =========================================================================
    # LOADING & FLUSHING
    # =========================================================================

    def load(self) -> "LedgerEngine":
        """
        Load every collection from the store, then reconcile debt statuses.

        A slot that is missing or unreadable starts empty. Records that fail
        validation (or repeat an id) are skipped and logged; they stay in the
        slot untouched, appended after the live records on every flush.
        Nothing here is raised.
        """
        for name in COLLECTIONS:
            self._state[name] = self._load_collection(name)
        self.reconcile_debts()
        return self

    def _load_collection(self, name: str) -> dict[str, LedgerModel]:
        slot = self._slots[name]
        self._rejected[name] = []
        try:
            records = self._store.load(slot)
        except StorageError as e:
            self._activity.slot_load_failed(slot, str(e))
            return {}

        if records is None:
            return {}

        entity_type = _ENTITY_TYPES[name]
        items: dict[str, LedgerModel] = {}
        rejected: list = []
        for index, record in enumerate(records):
            try:
                entity = entity_type.from_record(record)
            except ValidationError as e:
                rejected.append(record)
                self._activity.record_skipped(
                    slot, index, f"invalid record: {e.error_count()} error(s)"
                )
                continue
            if entity.id in items:
                rejected.append(record)
                self._activity.record_skipped(slot, index, f"duplicate id {entity.id}")
                continue
            items[entity.id] = entity

        # Skipped records are written back untouched on every flush
        self._rejected[name] = rejected

        if name == "transactions":
            # Stored newest first; kept internally in creation order
            items = dict(reversed(list(items.items())))
        return items

    def _exposed(self, name: str) -> list:
        items = list(self._state[name].values())
        if name == "transactions":
            items.reverse()
        return items

    def _flush(self, *names: str) -> None:
        for name in names:
            slot = self._slots[name]
            records = [entity.to_record() for entity in self._exposed(name)]
            records.extend(self._rejected[name])
            try:
                self._store.save(slot, records)
            except StorageError as e:
                # The in-memory state stays authoritative for this session
                self._activity.flush_failed(slot, str(e))

    def _commit(self, staged: dict[str, dict[str, LedgerModel]]) -> None:
        self._state.update(staged)
        self._flush(*staged)

    # =========================================================================
    # VALIDATION HELPERS
    # =========================================================================

    def _ensure_valid(self, result: ValidationResult) -> None:
        if result.has_errors:
            raise InvalidArgumentError(result)
        if result.warnings:
            self._activity.validation_warning(result)

    def _build(self, command: str, entity_type: Type[LedgerModel], **fields) -> LedgerModel:
        try:
            return entity_type(**fields)
        except ValidationError as e:
            issues = [
                ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]) or command,
                    issue_type=error["type"],
                    message=error["msg"],
                    severity="error",
                )
                for error in e.errors()
            ]
            raise InvalidArgumentError(ValidationResult(command=command, issues=issues))

    @staticmethod
    def _insert(items: dict[str, LedgerModel], entity: LedgerModel) -> None:
        if entity.id in items:
            raise LedgerError(f"Id collision on {type(entity).__name__} {entity.id}")
        items[entity.id] = entity

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def add_account(
        self,
        name: str,
        type,
        role,
        color: str = "#a855f7",
        balance=Decimal("0"),
    ) -> Account:
        """Create an account with an opening balance."""
        self._ensure_valid(self._validator.validate_account(name, type, role, balance))
        account = self._build(
            "add_account",
            Account,
            name=name,
            type=type,
            role=role,
            color=color,
            balance=balance,
        )

        accounts = dict(self._state["accounts"])
        self._insert(accounts, account)
        self._commit({"accounts": accounts})
        self._activity.account_added(account)
        return account

    def delete_account(self, account_id: str) -> bool:
        """
        Remove an account.

        Transactions and goals that reference it are left alone.
        Returns False if there was no such account.
        """
        if account_id not in self._state["accounts"]:
            return False
        accounts = dict(self._state["accounts"])
        del accounts[account_id]
        self._commit({"accounts": accounts})
        self._activity.account_deleted(account_id)
        return True

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def _apply_deltas(
        self,
        accounts: dict[str, LedgerModel],
        tx: Transaction,
        sign: int,
    ) -> None:
        for account_id, delta in balance_deltas(tx):
            account = accounts.get(account_id)
            if account is None:
                continue
            accounts[account_id] = account.model_copy(
                update={"balance": account.balance + sign * delta}
            )

    def _stage_transaction(
        self,
        command: str,
        account_id: str,
        type,
        amount,
        category: str,
        date,
        description: str,
        related_account_id: Optional[str],
    ) -> tuple[Transaction, dict[str, dict[str, LedgerModel]], list[str]]:
        """Validate and stage a new transaction without committing it."""
        result = self._validator.validate_transaction(
            account_id,
            type,
            amount,
            date,
            related_account_id=related_account_id,
            known_account_ids=self._state["accounts"].keys(),
            command=command,
        )
        self._ensure_valid(result)

        if TransactionType(type) == TransactionType.TRANSFER and not (category or "").strip():
            category = self._settings.transfer_category

        tx = self._build(
            command,
            Transaction,
            account_id=account_id,
            type=type,
            amount=amount,
            category=category or "",
            date=date,
            description=description or "",
            related_account_id=related_account_id,
        )

        transactions = dict(self._state["transactions"])
        self._insert(transactions, tx)

        accounts = dict(self._state["accounts"])
        self._apply_deltas(accounts, tx, +1)

        staged = {"transactions": transactions, "accounts": accounts}
        funded: list[str] = []
        if tx.is_transfer:
            goals = dict(self._state["goals"])
            for goal_id, goal in goals.items():
                if goal.linked_reserve_account_id == tx.related_account_id:
                    goals[goal_id] = goal.model_copy(
                        update={"current_amount": goal.current_amount + tx.amount}
                    )
                    funded.append(goal_id)
            if funded:
                staged["goals"] = goals

        return tx, staged, funded

    def add_transaction(
        self,
        account_id: str,
        type,
        amount,
        category: str,
        date,
        description: str = "",
        related_account_id: Optional[str] = None,
    ) -> Transaction:
        """
        Record a transaction and apply its balance changes.

        For transfers, account_id is the source and related_account_id the
        destination; every goal linked to the destination is credited.

        Raises:
            InvalidArgumentError: If the command is malformed (nothing applied)
        """
        tx, staged, funded = self._stage_transaction(
            "add_transaction",
            account_id,
            type,
            amount,
            category,
            date,
            description,
            related_account_id,
        )
        self._commit(staged)
        self._activity.transaction_added(tx, funded)
        return tx

    def delete_transaction(self, transaction_id: str) -> bool:
        """
        Remove a transaction and reverse its balance changes exactly.

        Goal amounts credited by a transfer are not reversed.
        Returns False (and does nothing) if there is no such transaction.
        """
        tx = self._state["transactions"].get(transaction_id)
        if tx is None:
            return False

        transactions = dict(self._state["transactions"])
        del transactions[transaction_id]
        accounts = dict(self._state["accounts"])
        self._apply_deltas(accounts, tx, -1)

        self._commit({"transactions": transactions, "accounts": accounts})
        self._activity.transaction_deleted(tx)
        return True

    # =========================================================================
    # GOALS
    # =========================================================================

    def add_goal(
        self,
        name: str,
        target_amount,
        deadline,
        linked_reserve_account_id: Optional[str] = None,
    ) -> Goal:
        """
        Create a goal.

        A linked goal starts at the linked account's current balance
        (or 0 if that account does not exist); an unlinked one at 0.
        """
        self._ensure_valid(self._validator.validate_goal(
            name,
            target_amount,
            deadline,
            linked_reserve_account_id=linked_reserve_account_id,
            known_account_ids=self._state["accounts"].keys(),
        ))

        current_amount = Decimal("0")
        linked = self._state["accounts"].get(linked_reserve_account_id or "")
        if linked is not None:
            current_amount = linked.balance

        goal = self._build(
            "add_goal",
            Goal,
            name=name,
            target_amount=target_amount,
            current_amount=current_amount,
            deadline=deadline,
            linked_reserve_account_id=linked_reserve_account_id or None,
        )

        goals = dict(self._state["goals"])
        self._insert(goals, goal)
        self._commit({"goals": goals})
        self._activity.goal_added(goal)
        return goal

    def update_goal(self, goal_id: str, current_amount) -> bool:
        """Overwrite a goal's saved amount. Returns False if there is no such goal."""
        goal = self._state["goals"].get(goal_id)
        if goal is None:
            return False
        self._ensure_valid(self._validator.validate_goal_amount(current_amount))

        updated = self._build(
            "update_goal",
            Goal,
            **{**goal.model_dump(), "current_amount": current_amount},
        )
        goals = dict(self._state["goals"])
        goals[goal_id] = updated
        self._commit({"goals": goals})
        self._activity.goal_updated(updated)
        return True

    def delete_goal(self, goal_id: str) -> bool:
        if goal_id not in self._state["goals"]:
            return False
        goals = dict(self._state["goals"])
        del goals[goal_id]
        self._commit({"goals": goals})
        self._activity.goal_deleted(goal_id)
        return True

    # =========================================================================
    # DEBTS
    # =========================================================================

    def add_debt(
        self,
        name: str,
        total_amount,
        due_date,
        installments: Optional[int] = None,
    ) -> Debt:
        """Create a pending debt."""
        self._ensure_valid(
            self._validator.validate_debt(name, total_amount, due_date, installments)
        )
        debt = self._build(
            "add_debt",
            Debt,
            name=name,
            total_amount=total_amount,
            due_date=due_date,
            status=DebtStatus.PENDING,
            installments=installments,
        )

        debts = dict(self._state["debts"])
        self._insert(debts, debt)
        self._commit({"debts": debts})
        self._activity.debt_added(debt)
        return debt

    def pay_debt(
        self,
        debt_id: str,
        account_id: str,
        now: Optional[datetime] = None,
    ) -> Optional[Transaction]:
        """
        Pay a debt in full from an account.

        Creates one expense transaction for the debt's total and marks the
        debt paid, as a single commit. Does nothing and returns None if the
        debt does not exist or is already paid.

        Raises:
            InvalidArgumentError: If the payment transaction is rejected;
                the debt keeps its status
        """
        debt = self._state["debts"].get(debt_id)
        if debt is None or debt.status == DebtStatus.PAID:
            return None

        tx, staged, funded = self._stage_transaction(
            "pay_debt",
            account_id,
            TransactionType.EXPENSE,
            debt.total_amount,
            self._settings.debt_payment_category,
            now or self._clock(),
            f"{self._settings.debt_payment_prefix}: {debt.name}",
            None,
        )

        debts = dict(self._state["debts"])
        debts[debt_id] = debt.model_copy(update={"status": DebtStatus.PAID})
        staged["debts"] = debts

        self._commit(staged)
        self._activity.transaction_added(tx, funded)
        self._activity.debt_paid(debts[debt_id], tx)
        return tx

    def delete_debt(self, debt_id: str) -> bool:
        """Remove a debt. A payment already made stays in the transactions."""
        if debt_id not in self._state["debts"]:
            return False
        debts = dict(self._state["debts"])
        del debts[debt_id]
        self._commit({"debts": debts})
        self._activity.debt_deleted(debt_id)
        return True

    def reconcile_debts(self, today: Optional[date] = None) -> int:
        """
        Promote unpaid debts whose due date has passed to OVERDUE.

        Safe to call any number of times; only flushes when something
        changed.

        Returns:
            How many debts changed status
        """
        today = today or local_date(self._clock(), self._tz)
        current = list(self._state["debts"].values())
        resolved = resolve_debt_statuses(current, today, self._tz)

        changed = [new.id for old, new in zip(current, resolved) if new is not old]
        if not changed:
            return 0

        self._commit({"debts": {debt.id: debt for debt in resolved}})
        self._activity.debts_reconciled(changed)
        return len(changed)

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def accounts(self) -> list[Account]:
        return self._exposed("accounts")

    @property
    def transactions(self) -> list[Transaction]:
        """Transactions, most recently created first."""
        return self._exposed("transactions")

    @property
    def goals(self) -> list[Goal]:
        return self._exposed("goals")

    @property
    def debts(self) -> list[Debt]:
        return self._exposed("debts")

    def get_account(self, account_id: str) -> Optional[Account]:
        return self._state["accounts"].get(account_id)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._state["transactions"].get(transaction_id)

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        return self._state["goals"].get(goal_id)

    def get_debt(self, debt_id: str) -> Optional[Debt]:
        return self._state["debts"].get(debt_id)

    def snapshot(self) -> LedgerSnapshot:
        """Immutable view of all four collections, for the query functions."""
        return LedgerSnapshot(
            accounts=tuple(self.accounts),
            transactions=tuple(self.transactions),
            goals=tuple(self.goals),
            debts=tuple(self.debts),
        )

    # =========================================================================
    # DERIVED QUERIES (thin wrappers over finance_tracker.queries)
    # =========================================================================

    def spending_balance(self) -> Decimal:
        return cashflow.spending_balance(self._state["accounts"].values())

    def reserve_balance(self) -> Decimal:
        return cashflow.reserve_balance(self._state["accounts"].values())

    def monthly_cashflow(self, month_ref) -> MonthlyCashflow:
        return cashflow.monthly_cashflow(self.transactions, month_ref, self._tz)

    def daily_cashflow(self, month_ref) -> list[DailyCashflow]:
        return cashflow.daily_cashflow(self.transactions, month_ref, self._tz)

    def expenses_by_category(self, month_ref) -> list[CategoryTotal]:
        return cashflow.expenses_by_category(
            self.transactions,
            month_ref,
            palette=self._settings.palette,
            tz=self._tz,
        )

    def dashboard(self, month_ref, today: Optional[date] = None) -> DashboardSummary:
        return dashboard.build_dashboard(
            self.snapshot(),
            month_ref,
            today=today or local_date(self._clock(), self._tz),
            palette=self._settings.palette,
            recent_limit=self._settings.recent_transactions_limit,
            tz=self._tz,
        )
