"""Tests for the ledger engine state transitions."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from finance_tracker.config import LedgerSettings
from finance_tracker.ledger import (
    InvalidArgumentError,
    LedgerEngine,
    LedgerError,
    balance_deltas,
)
from finance_tracker.models import Account, DebtStatus, TransactionType
from finance_tracker.services.storage import InMemoryStore, StorageUnavailableError

NOW = datetime(2024, 5, 20, 10, 30)


def _signed_sum(engine, account_id):
    """Balance contribution of every transaction currently referencing an account."""
    total = Decimal("0")
    for tx in engine.transactions:
        for target, delta in balance_deltas(tx):
            if target == account_id:
                total += delta
    return total


@pytest.fixture
def accounts(engine):
    checking = engine.add_account("Nubank", "bank", "spending", "#a855f7", Decimal("0"))
    wallet = engine.add_account("Carteira", "wallet", "spending", "#10b981", Decimal("0"))
    reserve = engine.add_account("Reserva", "investment", "reserve", "#3b82f6", Decimal("0"))
    return checking, wallet, reserve


class TestAccounts:
    """Tests for add/delete account."""

    def test_add_account_keeps_creation_order(self, engine):
        first = engine.add_account("A", "bank", "spending", "#fff", 10)
        second = engine.add_account("B", "wallet", "reserve", "#000", 20)
        assert [a.id for a in engine.accounts] == [first.id, second.id]
        assert engine.get_account(first.id).balance == Decimal("10")

    def test_add_account_flushes_slot(self, engine, store):
        account = engine.add_account("A", "bank", "spending", "#fff", "12.34")
        records = store.load("@finance:accounts")
        assert records == [account.to_record()]
        assert records[0]["balance"] == 12.34

    def test_delete_account_leaves_transactions_dangling(self, engine, accounts):
        checking, wallet, _ = accounts
        tx = engine.add_transaction(checking.id, "expense", 50, "Lazer", "2024-05-03")

        assert engine.delete_account(checking.id) is True

        assert engine.get_account(checking.id) is None
        assert engine.get_transaction(tx.id) is not None
        # Deleting a transaction of a missing account is still fine
        assert engine.delete_transaction(tx.id) is True
        assert engine.get_account(wallet.id).balance == Decimal("0")

    def test_delete_missing_account_is_noop(self, engine, store):
        saves = store.save_count
        assert engine.delete_account("nope") is False
        assert store.save_count == saves

    def test_add_account_rejects_blank_name(self, engine):
        with pytest.raises(InvalidArgumentError, match="name"):
            engine.add_account("   ", "bank", "spending", "#fff", 0)
        assert engine.accounts == []


class TestTransactionBalances:
    """Balance rules for add/delete transaction."""

    def test_income_adds(self, engine, accounts):
        checking, _, _ = accounts
        engine.add_transaction(checking.id, "income", Decimal("1000"), "Salário", "2024-05-05")
        assert engine.get_account(checking.id).balance == Decimal("1000")

    def test_expense_subtracts(self, engine, accounts):
        checking, _, _ = accounts
        engine.add_transaction(checking.id, "expense", Decimal("300"), "Moradia", "2024-05-10")
        assert engine.get_account(checking.id).balance == Decimal("-300")

    def test_transfer_moves_between_accounts(self, engine, accounts):
        checking, _, reserve = accounts
        engine.add_transaction(
            checking.id, "transfer", Decimal("200"), "", "2024-05-15",
            related_account_id=reserve.id,
        )
        assert engine.get_account(checking.id).balance == Decimal("-200")
        assert engine.get_account(reserve.id).balance == Decimal("200")

    def test_transfer_gets_default_category(self, engine, accounts):
        checking, _, reserve = accounts
        tx = engine.add_transaction(
            checking.id, "transfer", 10, "  ", "2024-05-15", related_account_id=reserve.id,
        )
        assert tx.category == "Transferência"

    def test_same_account_transfer_nets_zero(self, engine, accounts):
        checking, _, _ = accounts
        engine.add_transaction(
            checking.id, "transfer", 75, "", "2024-05-15", related_account_id=checking.id,
        )
        assert engine.get_account(checking.id).balance == Decimal("0")
        assert len(engine.transactions) == 1

    def test_repeated_small_amounts_stay_exact(self, engine, accounts):
        checking, _, _ = accounts
        for _ in range(10):
            engine.add_transaction(checking.id, "income", 0.1, "Outros", "2024-05-01")
        assert engine.get_account(checking.id).balance == Decimal("1.0")

    def test_transactions_exposed_newest_first(self, engine, accounts):
        checking, _, _ = accounts
        first = engine.add_transaction(checking.id, "income", 1, "A", "2024-05-01")
        second = engine.add_transaction(checking.id, "income", 2, "B", "2024-04-01")
        assert [t.id for t in engine.transactions] == [second.id, first.id]

    @pytest.mark.parametrize("tx_type", ["income", "expense", "transfer"])
    def test_add_then_delete_restores_balances(self, engine, accounts, tx_type):
        checking, wallet, _ = accounts
        engine.add_transaction(checking.id, "income", Decimal("500.55"), "Salário", "2024-05-01")
        before = {a.id: a.balance for a in engine.accounts}

        tx = engine.add_transaction(
            checking.id,
            tx_type,
            Decimal("123.45"),
            "Compras",
            "2024-05-02",
            related_account_id=wallet.id if tx_type == "transfer" else None,
        )
        assert engine.delete_transaction(tx.id) is True

        assert {a.id: a.balance for a in engine.accounts} == before
        assert engine.get_transaction(tx.id) is None

    def test_balance_conservation_over_mixed_sequence(self, engine, accounts):
        checking, wallet, reserve = accounts
        created = [
            engine.add_transaction(checking.id, "income", "3500", "Salário", "2024-05-05"),
            engine.add_transaction(checking.id, "expense", "89.90", "Alimentação", "2024-05-06"),
            engine.add_transaction(
                checking.id, "transfer", "1000", "", "2024-05-07", related_account_id=reserve.id
            ),
            engine.add_transaction(
                checking.id, "transfer", "150", "", "2024-05-08", related_account_id=wallet.id
            ),
            engine.add_transaction(wallet.id, "expense", "42.10", "Transporte", "2024-05-09"),
            engine.add_transaction(reserve.id, "income", "12.34", "Rendimento", "2024-05-31"),
        ]
        engine.delete_transaction(created[1].id)
        engine.delete_transaction(created[3].id)

        for account in engine.accounts:
            assert account.balance == _signed_sum(engine, account.id)
        assert engine.get_account(checking.id).balance == Decimal("2500")
        assert engine.get_account(reserve.id).balance == Decimal("1012.34")
        assert engine.get_account(wallet.id).balance == Decimal("-42.10")

    def test_delete_missing_transaction_is_noop(self, engine, accounts, store):
        saves = store.save_count
        assert engine.delete_transaction("missing") is False
        assert store.save_count == saves

    def test_transaction_slot_is_stored_newest_first(self, engine, accounts, store):
        checking, _, _ = accounts
        first = engine.add_transaction(checking.id, "income", 1, "A", "2024-05-01")
        second = engine.add_transaction(checking.id, "expense", 2, "B", "2024-05-02")
        records = store.load("@finance:transactions")
        assert [r["id"] for r in records] == [second.id, first.id]
        assert store.load("@finance:accounts")[0]["balance"] == -1


class TestTransactionValidation:
    """Malformed commands are rejected before anything changes."""

    @pytest.mark.parametrize(
        "kwargs, field",
        [
            ({"type": "expense", "amount": 0}, "amount"),
            ({"type": "expense", "amount": -10}, "amount"),
            ({"type": "expense", "amount": "abc"}, "amount"),
            ({"type": "transfer", "amount": 10}, "related_account_id"),
            ({"type": "refund", "amount": 10}, "type"),
            ({"type": "expense", "amount": 10, "date": "31/12/2024"}, "date"),
            ({"type": "income", "amount": 10, "related_account_id": "x"}, "related_account_id"),
        ],
    )
    def test_rejected_without_side_effects(self, engine, accounts, store, kwargs, field):
        checking, _, _ = accounts
        saves = store.save_count
        args = {"category": "Lazer", "date": "2024-05-03", **kwargs}

        with pytest.raises(InvalidArgumentError) as excinfo:
            engine.add_transaction(checking.id, **args)

        assert field in [issue.field for issue in excinfo.value.issues]
        assert engine.transactions == []
        assert engine.get_account(checking.id).balance == Decimal("0")
        assert store.save_count == saves

    def test_unknown_account_is_only_a_warning(self, engine):
        tx = engine.add_transaction("ghost", "income", 10, "Outros", "2024-05-03")
        assert engine.get_transaction(tx.id) is not None
        assert engine.accounts == []


class TestGoals:
    """Goal creation, transfer funding and manual updates."""

    def test_unlinked_goal_starts_at_zero(self, engine):
        goal = engine.add_goal("Viagem", 5000, "2024-12-31")
        assert goal.current_amount == Decimal("0")

    def test_linked_goal_seeded_from_account_balance(self, engine):
        reserve = engine.add_account("Reserva", "investment", "reserve", "#3b82f6", "2500.75")
        goal = engine.add_goal("Emergência", 10000, "2025-06-30", reserve.id)
        assert goal.current_amount == Decimal("2500.75")

    def test_linked_to_missing_account_starts_at_zero(self, engine):
        goal = engine.add_goal("Emergência", 10000, "2025-06-30", "gone")
        assert goal.current_amount == Decimal("0")
        assert goal.linked_reserve_account_id == "gone"

    def test_transfer_funds_linked_goal_once_per_transfer(self, engine, accounts):
        checking, wallet, reserve = accounts
        goal = engine.add_goal("Emergência", 10000, "2025-06-30", reserve.id)

        engine.add_transaction(
            checking.id, "transfer", 300, "", "2024-05-10", related_account_id=reserve.id
        )
        assert engine.get_goal(goal.id).current_amount == Decimal("300")

        engine.add_transaction(
            checking.id, "transfer", 50, "", "2024-05-11", related_account_id=wallet.id
        )
        assert engine.get_goal(goal.id).current_amount == Decimal("300")

        engine.add_transaction(
            checking.id, "transfer", 200, "", "2024-05-12", related_account_id=reserve.id
        )
        assert engine.get_goal(goal.id).current_amount == Decimal("500")

    def test_transfer_out_of_linked_account_does_not_reduce_goal(self, engine, accounts):
        checking, _, reserve = accounts
        goal = engine.add_goal("Emergência", 10000, "2025-06-30", reserve.id)
        engine.add_transaction(
            reserve.id, "transfer", 100, "", "2024-05-10", related_account_id=checking.id
        )
        assert engine.get_goal(goal.id).current_amount == Decimal("0")

    def test_income_into_linked_account_does_not_fund_goal(self, engine, accounts):
        _, _, reserve = accounts
        goal = engine.add_goal("Emergência", 10000, "2025-06-30", reserve.id)
        engine.add_transaction(reserve.id, "income", 100, "Rendimento", "2024-05-10")
        assert engine.get_goal(goal.id).current_amount == Decimal("0")

    def test_every_goal_linked_to_destination_is_funded(self, engine, accounts):
        checking, _, reserve = accounts
        g1 = engine.add_goal("Carro", 30000, "2026-01-01", reserve.id)
        g2 = engine.add_goal("Casa", 90000, "2030-01-01", reserve.id)
        engine.add_transaction(
            checking.id, "transfer", 120, "", "2024-05-10", related_account_id=reserve.id
        )
        assert engine.get_goal(g1.id).current_amount == Decimal("120")
        assert engine.get_goal(g2.id).current_amount == Decimal("120")

    def test_deleting_transfer_keeps_goal_increment(self, engine, accounts):
        checking, _, reserve = accounts
        goal = engine.add_goal("Emergência", 10000, "2025-06-30", reserve.id)
        tx = engine.add_transaction(
            checking.id, "transfer", 300, "", "2024-05-10", related_account_id=reserve.id
        )
        engine.delete_transaction(tx.id)

        assert engine.get_account(reserve.id).balance == Decimal("0")
        assert engine.get_goal(goal.id).current_amount == Decimal("300")

    def test_update_goal_overwrites_amount(self, engine):
        goal = engine.add_goal("Viagem", 5000, "2024-12-31")
        assert engine.update_goal(goal.id, "1250.50") is True
        assert engine.get_goal(goal.id).current_amount == Decimal("1250.50")

    def test_update_missing_goal_returns_false(self, engine):
        assert engine.update_goal("missing", 10) is False

    def test_update_missing_goal_ignores_bad_amount(self, engine, store):
        saves = store.save_count
        assert engine.update_goal("missing", -1) is False
        assert engine.update_goal("missing", "abc") is False
        assert store.save_count == saves

    def test_update_goal_rejects_negative(self, engine):
        goal = engine.add_goal("Viagem", 5000, "2024-12-31")
        with pytest.raises(InvalidArgumentError):
            engine.update_goal(goal.id, -1)
        assert engine.get_goal(goal.id).current_amount == Decimal("0")

    def test_delete_goal(self, engine):
        goal = engine.add_goal("Viagem", 5000, "2024-12-31")
        assert engine.delete_goal(goal.id) is True
        assert engine.goals == []
        assert engine.delete_goal(goal.id) is False

    def test_add_goal_rejects_zero_target(self, engine):
        with pytest.raises(InvalidArgumentError, match="target_amount"):
            engine.add_goal("Viagem", 0, "2024-12-31")


class TestDebts:
    """Debt creation, payment and deletion."""

    def test_add_debt_is_pending(self, engine):
        debt = engine.add_debt("Cartão", Decimal("850"), "2024-06-10", installments=3)
        assert debt.status == DebtStatus.PENDING
        assert debt.installments == 3

    def test_pay_debt_creates_one_expense_and_marks_paid(self, engine, accounts, store):
        checking, _, _ = accounts
        debt = engine.add_debt("Cartão", Decimal("850.40"), "2024-06-10")

        tx = engine.pay_debt(debt.id, checking.id)

        assert tx.type == TransactionType.EXPENSE
        assert tx.amount == Decimal("850.40")
        assert tx.account_id == checking.id
        assert tx.category == "Dívidas"
        assert tx.description == "Pagamento: Cartão"
        assert tx.date == NOW
        assert engine.get_debt(debt.id).status == DebtStatus.PAID
        assert engine.get_account(checking.id).balance == Decimal("-850.40")
        assert store.load("@finance:debts")[0]["status"] == "paid"

    def test_paying_twice_is_noop(self, engine, accounts):
        checking, _, _ = accounts
        debt = engine.add_debt("Cartão", 100, "2024-06-10")
        engine.pay_debt(debt.id, checking.id)

        assert engine.pay_debt(debt.id, checking.id) is None
        assert len(engine.transactions) == 1
        assert engine.get_account(checking.id).balance == Decimal("-100")
        assert engine.get_debt(debt.id).status == DebtStatus.PAID

    def test_pay_missing_debt_is_noop(self, engine, accounts):
        checking, _, _ = accounts
        assert engine.pay_debt("missing", checking.id) is None
        assert engine.transactions == []

    def test_failed_payment_leaves_debt_unpaid(self, engine, accounts, store):
        debt = engine.add_debt("Cartão", 100, "2024-06-10")
        saves = store.save_count

        with pytest.raises(InvalidArgumentError):
            engine.pay_debt(debt.id, "")

        assert engine.get_debt(debt.id).status == DebtStatus.PENDING
        assert engine.transactions == []
        assert store.save_count == saves

    def test_overdue_debt_can_be_paid(self, engine, accounts):
        checking, _, _ = accounts
        debt = engine.add_debt("Luz", 180, "2024-05-01")
        engine.reconcile_debts()
        assert engine.get_debt(debt.id).status == DebtStatus.OVERDUE

        engine.pay_debt(debt.id, checking.id)
        assert engine.get_debt(debt.id).status == DebtStatus.PAID

    def test_pay_debt_uses_explicit_time(self, engine, accounts):
        checking, _, _ = accounts
        debt = engine.add_debt("Luz", 180, "2024-05-01")
        when = datetime(2024, 5, 2, 9, 0)
        tx = engine.pay_debt(debt.id, checking.id, now=when)
        assert tx.date == when

    def test_delete_debt_keeps_payment(self, engine, accounts):
        checking, _, _ = accounts
        debt = engine.add_debt("Luz", 180, "2024-05-01")
        tx = engine.pay_debt(debt.id, checking.id)

        assert engine.delete_debt(debt.id) is True
        assert engine.get_debt(debt.id) is None
        assert engine.get_transaction(tx.id) is not None
        assert engine.get_account(checking.id).balance == Decimal("-180")

    def test_add_debt_validation(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.add_debt("Cartão", 0, "2024-06-10")
        with pytest.raises(InvalidArgumentError):
            engine.add_debt("Cartão", 10, "2024-06-10", installments=0)
        assert engine.debts == []


class TestLoading:
    """Loading persisted slots."""

    def _seeded_store(self):
        return InMemoryStore({
            "@finance:accounts": [
                {"id": "a1", "name": "Nubank", "type": "bank", "role": "spending",
                 "color": "#a855f7", "balance": 700},
                {"id": "a2", "name": "Reserva", "type": "investment", "role": "reserve",
                 "color": "#3b82f6", "balance": 200.5},
            ],
            "@finance:transactions": [
                {"id": "t2", "accountId": "a1", "type": "transfer", "amount": 200.5,
                 "category": "Transferência", "date": "2024-05-15T15:00:00.000Z",
                 "description": "", "relatedAccountId": "a2"},
                {"id": "t1", "accountId": "a1", "type": "income", "amount": 900.5,
                 "category": "Salário", "date": "2024-05-05T15:00:00.000Z",
                 "description": "Salário"},
            ],
            "@finance:goals": [
                {"id": "g1", "name": "Emergência", "targetAmount": 10000,
                 "currentAmount": 200.5, "deadline": "2025-01-01T15:00:00.000Z",
                 "linkedReserveAccountId": "a2"},
            ],
            "@finance:debts": [
                {"id": "d1", "name": "Cartão", "totalAmount": 850,
                 "dueDate": "2024-05-01T15:00:00.000Z", "status": "pending",
                 "installments": 1},
                {"id": "d2", "name": "Luz", "totalAmount": 180,
                 "dueDate": "2024-06-01T15:00:00.000Z", "status": "pending"},
            ],
        })

    def test_loads_every_collection(self, ledger_settings):
        store = self._seeded_store()
        engine = LedgerEngine(store, settings=ledger_settings, clock=lambda: NOW).load()

        assert [a.id for a in engine.accounts] == ["a1", "a2"]
        assert [t.id for t in engine.transactions] == ["t2", "t1"]
        assert engine.get_account("a2").balance == Decimal("200.5")
        assert engine.get_goal("g1").linked_reserve_account_id == "a2"

    def test_load_reconciles_overdue_debts(self, ledger_settings):
        store = self._seeded_store()
        engine = LedgerEngine(store, settings=ledger_settings, clock=lambda: NOW).load()

        assert engine.get_debt("d1").status == DebtStatus.OVERDUE
        assert engine.get_debt("d2").status == DebtStatus.PENDING
        assert store.load("@finance:debts")[0]["status"] == "overdue"

    def test_loaded_ledger_keeps_working(self, ledger_settings):
        store = self._seeded_store()
        engine = LedgerEngine(store, settings=ledger_settings, clock=lambda: NOW).load()
        new = engine.add_transaction("a1", "transfer", 99.5, "", "2024-05-20",
                                     related_account_id="a2")

        assert engine.get_account("a1").balance == Decimal("600.5")
        assert engine.get_goal("g1").current_amount == Decimal("300.0")
        assert store.load("@finance:transactions")[0]["id"] == new.id

    def test_corrupt_slot_starts_empty(self, ledger_settings):
        store = self._seeded_store()
        store.put_raw("@finance:goals", "{not json")
        engine = LedgerEngine(store, settings=ledger_settings, clock=lambda: NOW).load()

        assert engine.goals == []
        assert len(engine.accounts) == 2

    def test_invalid_record_is_skipped_and_kept_in_slot(self, ledger_settings):
        store = self._seeded_store()
        legacy = {"id": "d9", "name": "Geladeira", "totalAmount": 2400,
                  "dueDate": "2030-01-10T15:00:00.000Z", "status": "pending",
                  "installments": 0}
        debts = store.load("@finance:debts") + [legacy]
        store.save("@finance:debts", debts)

        engine = LedgerEngine(store, settings=ledger_settings, clock=lambda: NOW).load()
        assert [d.id for d in engine.debts] == ["d1", "d2"]

        added = engine.add_debt("Internet", 120, "2030-02-01")
        stored = store.load("@finance:debts")
        assert [r["id"] for r in stored] == ["d1", "d2", added.id, "d9"]
        assert stored[-1] == legacy

    def test_one_bad_account_keeps_its_neighbours(self, ledger_settings):
        store = self._seeded_store()
        accounts = store.load("@finance:accounts")
        accounts.insert(1, {"id": "a3", "name": "X", "type": "cash",
                            "role": "spending", "balance": 1})
        store.save("@finance:accounts", accounts)

        engine = LedgerEngine(store, settings=ledger_settings, clock=lambda: NOW).load()
        assert [a.id for a in engine.accounts] == ["a1", "a2"]
        assert len(engine.transactions) == 2

        engine.add_transaction("a1", "expense", 1, "Lazer", "2024-05-20")
        assert [r["id"] for r in store.load("@finance:accounts")] == ["a1", "a2", "a3"]

    def test_duplicate_id_keeps_first_record(self, ledger_settings):
        record = {"id": "d1", "name": "Luz", "totalAmount": 1, "dueDate": "2030-01-01",
                  "status": "pending"}
        copy = dict(record, name="Luz (cópia)")
        store = InMemoryStore({"@finance:debts": [record, copy]})
        engine = LedgerEngine(store, settings=ledger_settings, clock=lambda: NOW).load()

        assert [d.name for d in engine.debts] == ["Luz"]
        engine.add_debt("Água", 90, "2030-01-05")
        assert store.load("@finance:debts")[-1] == copy

    def test_invalid_transaction_does_not_shift_order(self, ledger_settings):
        store = self._seeded_store()
        transactions = store.load("@finance:transactions")
        transactions.insert(1, {"id": "t9", "accountId": "a1", "type": "expense",
                                "amount": -5, "date": "2024-05-10"})
        store.save("@finance:transactions", transactions)

        engine = LedgerEngine(store, settings=ledger_settings, clock=lambda: NOW).load()
        assert [t.id for t in engine.transactions] == ["t2", "t1"]

    def test_empty_store_loads_empty(self, engine):
        assert engine.snapshot().accounts == ()
        assert engine.transactions == []

    def test_custom_slot_names(self, ledger_settings):
        store = InMemoryStore()
        engine = LedgerEngine(
            store,
            settings=ledger_settings,
            slots={"accounts": "custom:accounts"},
        ).load()
        engine.add_account("A", "bank", "spending", "#fff", 1)
        assert store.load("custom:accounts") is not None
        assert store.load("@finance:accounts") is None


class FailingStore(InMemoryStore):
    """Store whose writes always fail."""

    def save(self, slot, records):
        raise StorageUnavailableError("disk full")


class TestFlushFailures:
    """A failed flush is logged, never raised."""

    def test_mutation_survives_failed_flush(self, ledger_settings):
        engine = LedgerEngine(FailingStore(), settings=ledger_settings).load()
        account = engine.add_account("A", "bank", "spending", "#fff", 5)
        assert engine.get_account(account.id).balance == Decimal("5")


class TestSnapshotAndDerived:
    """Snapshot and derived-query wrappers."""

    def test_snapshot_matches_exposed_order(self, engine, accounts):
        checking, _, _ = accounts
        t1 = engine.add_transaction(checking.id, "income", 1, "A", "2024-05-01")
        t2 = engine.add_transaction(checking.id, "income", 1, "A", "2024-05-02")
        snap = engine.snapshot()
        assert [t.id for t in snap.transactions] == [t2.id, t1.id]
        assert [a.id for a in snap.accounts] == [a.id for a in accounts]

    def test_role_balances(self, engine, accounts):
        checking, wallet, reserve = accounts
        engine.add_transaction(checking.id, "income", 1000, "Salário", "2024-05-05")
        engine.add_transaction(wallet.id, "income", 50, "Outros", "2024-05-05")
        engine.add_transaction(
            checking.id, "transfer", 400, "", "2024-05-06", related_account_id=reserve.id
        )
        assert engine.spending_balance() == Decimal("650")
        assert engine.reserve_balance() == Decimal("400")

    def test_category_palette_comes_from_settings(self, store):
        engine = LedgerEngine(
            store,
            settings=LedgerSettings(timezone="", category_palette="#111,#222"),
        ).load()
        account = engine.add_account("A", "bank", "spending", "#fff", 0)
        for category, amount in (("A", 1), ("B", 2), ("C", 3)):
            engine.add_transaction(account.id, "expense", amount, category, "2024-05-05")
        colors = [c.color for c in engine.expenses_by_category(date(2024, 5, 1))]
        assert colors == ["#111", "#222", "#111"]


class TestIdCollision:
    """Committing an entity whose id already exists is a programming error."""

    def test_insert_rejects_existing_id(self):
        existing = Account(id="same", name="A", type="bank", role="spending")
        items = {"same": existing}
        with pytest.raises(LedgerError, match="Id collision"):
            LedgerEngine._insert(items, Account(id="same", name="B", type="bank", role="spending"))
