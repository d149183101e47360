"""Domain model entities for ledgerbook.

These are pure data classes representing bookkeeping concepts, independent of
the database schema. Services only ever exchange these objects with the
storage layer, never ORM rows.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class LedgerCategory(str, Enum):
    """Closed set of ledger categories."""

    INCOME = "income"
    EXPENSE = "expense"
    RECEIVABLE = "receivable"
    PAYABLE = "payable"
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"

    @classmethod
    def parse(cls, value: "str | LedgerCategory") -> "LedgerCategory":
        """Parse a category name case-insensitively.

        Raises:
            ValueError: If the value is not a known category
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown ledger category '{value}'. Expected one of: {allowed}")


class Direction(str, Enum):
    """Money flow direction; amounts are always stored as magnitudes."""

    CREDIT = "credit"
    DEBIT = "debit"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.CREDIT else -1


class TransactionState(str, Enum):
    IMPORTED = "imported"
    SUGGESTED = "suggested"
    CONFIRMED = "confirmed"


class ReminderType(str, Enum):
    RECEIVABLE = "receivable"
    PAYABLE = "payable"


class ReminderStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ReminderStatus.COMPLETED, ReminderStatus.CANCELLED)


class DeliveryChannel(str, Enum):
    SMS = "sms"
    WHATSAPP = "whatsapp"
    EMAIL = "email"


@dataclass(frozen=True)
class Ledger:
    """Categorization target. System ledgers have no owner."""

    id: int
    name: str
    category: LedgerCategory
    user_id: Optional[str]
    is_system: bool
    created_at: datetime


@dataclass(frozen=True)
class BankAccount:
    """Bank account domain entity.

    ``current_balance`` is the balance seeded at creation. It is not moved by
    transactions.
    """

    id: int
    user_id: str
    name: str
    account_number: Optional[str]
    account_type: str
    current_balance: Decimal
    is_active: bool
    currency: str
    created_at: datetime


@dataclass(frozen=True)
class Contact:
    """Counterparty with cached receivable/payable running totals."""

    id: int
    user_id: str
    name: str
    phone: Optional[str]
    email: Optional[str]
    total_receivable: Decimal
    total_payable: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``bank_account_id`` of None means the transaction is a cash transaction.
    """

    id: int
    user_id: str
    bank_account_id: Optional[int]
    date: date
    description: str
    amount: Decimal
    direction: Direction
    ledger_id: Optional[int]
    narration: Optional[str]
    state: TransactionState
    is_confirmed: bool
    is_reconciled: bool
    ai_suggested: bool
    suggestion_confidence: Optional[float]
    suggested_ledger_name: Optional[str]
    suggested_category: Optional[LedgerCategory]
    balance_after: Optional[Decimal]
    contact_id: Optional[int]
    related_transaction_id: Optional[int]
    created_at: datetime

    @property
    def is_cash(self) -> bool:
        return self.bank_account_id is None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount * self.direction.sign


@dataclass(frozen=True)
class RawTransaction:
    """Already-parsed statement row, before it is stored."""

    date: date
    description: str
    amount: Decimal
    direction: Direction
    balance_after: Optional[Decimal] = None


@dataclass(frozen=True)
class Mapping:
    """Pattern memory entry learned from a confirmed transaction."""

    id: int
    user_id: str
    description: str
    ledger_id: int
    narration: Optional[str]
    usage_count: int
    confidence_score: float
    last_used_at: datetime
    created_at: datetime


@dataclass(frozen=True)
class Reminder:
    """Payment reminder domain entity."""

    id: int
    user_id: str
    transaction_id: Optional[int]
    contact_id: Optional[int]
    due_date: date
    amount: Decimal
    message: str
    reminder_type: ReminderType
    status: ReminderStatus
    channel: Optional[DeliveryChannel]
    sent_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class Suggestion:
    """Best-effort categorization for a transaction."""

    ledger_name: str
    category: LedgerCategory
    narration: str
    confidence: float
    source: str = "pattern"


@dataclass(frozen=True)
class BalanceSummary:
    """Aggregated totals derived from confirmed transactions."""

    bank_total: Decimal
    bank_balances: dict[int, Decimal]
    cash_balance: Decimal
    income: Decimal
    expense: Decimal
    receivables: Decimal
    payables: Decimal
    transaction_count: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class PeriodStats:
    """Figures handed to the insight generator."""

    label: str
    income: Decimal
    expense: Decimal
    transaction_count: int
    top_expenses: tuple[tuple[str, Decimal], ...] = field(default_factory=tuple)

    @property
    def net(self) -> Decimal:
        return self.income - self.expense
