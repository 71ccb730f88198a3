"""
Core Data Models for Finance Tracker

These models define the shape of every entity the ledger engine owns.
They are designed to:
1. Enforce type safety at runtime
2. Keep monetary values exact (Decimal, never binary float)
3. Serialize to the exact camelCase records already stored on disk

DESIGN DECISION: Models are frozen. The engine never edits an entity in
place; it builds a new version with model_copy() and swaps it in, which is
what makes staged, all-or-nothing commits possible.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from finance_tracker.utils.dates import parse_timestamp
from finance_tracker.utils.decimal_utils import coerce_decimal


def new_id() -> str:
    """Fresh unique entity id (UUID4 string)."""
    return str(uuid4())


def _decimal_to_json(value: Decimal):
    """
    Stored form of a money value.

    Integral values are written as ints and everything a float holds
    exactly as a float, so stored records stay plain JSON numbers. A value
    with more digits than a float keeps is written as its decimal text,
    which reads back exactly.
    """
    if value == value.to_integral_value():
        return int(value)
    as_float = float(value)
    if Decimal(repr(as_float)) == value:
        return as_float
    return str(value)


Money = Annotated[
    Decimal,
    BeforeValidator(coerce_decimal),
    PlainSerializer(_decimal_to_json, when_used="json"),
]

Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]


# =============================================================================
# ENUMS - Persisted literals, never rename
# =============================================================================

class AccountType(str, Enum):
    """Kind of place the money sits in."""
    WALLET = "wallet"
    BANK = "bank"
    INVESTMENT = "investment"


class AccountRole(str, Enum):
    """
    What the account's money is for.

    Spending accounts make up the available balance; reserve accounts
    make up savings and can back a goal.
    """
    SPENDING = "spending"
    RESERVE = "reserve"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class DebtStatus(str, Enum):
    """
    Debt lifecycle.

    pending -> overdue happens automatically once the due date has passed.
    pending|overdue -> paid only happens through an explicit payment.
    PAID is terminal.
    """
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


# =============================================================================
# ENTITIES
# =============================================================================

class LedgerModel(BaseModel):
    """Base for persisted entities: camelCase on disk, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    def to_record(self) -> dict:
        """Serialize to the stored record format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, record: dict):
        """Build an entity from a stored record."""
        return cls.model_validate(record)


class Account(LedgerModel):
    """
    A place that holds money.

    balance is a stored running total. It is changed only by the ledger
    engine, incrementally, whenever a transaction touching this account is
    added or deleted.
    """

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    type: AccountType
    role: AccountRole
    color: str = Field(default="#a855f7", max_length=50)
    balance: Money = Decimal("0")


class Transaction(LedgerModel):
    """
    A single money movement. Immutable: it can only be created or deleted.

    For transfers, account_id is the source and related_account_id the
    destination.
    """

    id: str = Field(default_factory=new_id)
    account_id: str = Field(..., min_length=1)
    type: TransactionType
    amount: Annotated[Money, Field(gt=0)]
    category: str = ""
    date: Timestamp
    description: str = ""
    related_account_id: Optional[str] = None

    @model_validator(mode='after')
    def validate_transfer_destination(self) -> 'Transaction':
        if self.type == TransactionType.TRANSFER and not self.related_account_id:
            raise ValueError("Transfer requires a destination account")
        return self

    @property
    def is_transfer(self) -> bool:
        return self.type == TransactionType.TRANSFER


class Goal(LedgerModel):
    """
    A savings target.

    A goal linked to a reserve account is seeded with that account's balance
    when created and then grows with every transfer into the account.
    Unlinked goals only move through a manual update.
    """

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    target_amount: Annotated[Money, Field(gt=0)]
    current_amount: Money = Decimal("0")
    deadline: Timestamp
    linked_reserve_account_id: Optional[str] = None

    @property
    def is_linked(self) -> bool:
        return bool(self.linked_reserve_account_id)


class Debt(LedgerModel):
    """A bill or loan to be paid in full on or before its due date."""

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    total_amount: Annotated[Money, Field(gt=0)]
    due_date: Timestamp
    status: DebtStatus = DebtStatus.PENDING
    installments: Optional[int] = Field(default=None, ge=1)

    @property
    def is_settled(self) -> bool:
        return self.status == DebtStatus.PAID


class LedgerSnapshot(BaseModel):
    """
    Read-only view of the four collections at one instant.

    Ordering matches what the engine exposes: oldest first, except
    transactions which are newest first.
    """

    model_config = ConfigDict(frozen=True)

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    goals: tuple[Goal, ...] = ()
    debts: tuple[Debt, ...] = ()
