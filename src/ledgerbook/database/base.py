"""Abstract database interface.

Every user-scoped operation takes the owning ``user_id`` explicitly and must
filter on it; there is no ambient "current user".
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    BankAccount,
    Contact,
    Direction,
    Ledger,
    LedgerCategory,
    Mapping,
    Reminder,
    ReminderStatus,
    Transaction,
    TransactionState,
)


class Database(ABC):
    """Abstract storage collaborator for ledgerbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group writes so they are committed together or not at all."""
        pass

    # Ledger operations
    @abstractmethod
    def create_ledger(
        self,
        user_id: Optional[str],
        name: str,
        category: LedgerCategory,
        is_system: bool = False,
    ) -> int:
        """Create a ledger. Returns ledger ID.

        Raises DuplicateLedgerNameError when the owner already has the name.
        """
        pass

    @abstractmethod
    def get_ledger(self, user_id: str, ledger_id: int) -> Optional[Ledger]:
        """Get a ledger visible to the user (own or system)."""
        pass

    @abstractmethod
    def find_ledger_by_name(self, user_id: str, name: str) -> Optional[Ledger]:
        """Find a visible ledger by case-insensitive name. Own ledgers win."""
        pass

    @abstractmethod
    def list_ledgers(self, user_id: str) -> list[Ledger]:
        """List system ledgers plus the user's own, sorted by name."""
        pass

    @abstractmethod
    def list_system_ledgers(self) -> list[Ledger]:
        """List shared system ledgers."""
        pass

    @abstractmethod
    def update_ledger(
        self,
        user_id: str,
        ledger_id: int,
        name: Optional[str] = None,
        category: Optional[LedgerCategory] = None,
    ) -> None:
        """Update a user-owned ledger."""
        pass

    @abstractmethod
    def delete_ledger(self, user_id: str, ledger_id: int) -> None:
        """Delete a user-owned ledger."""
        pass

    @abstractmethod
    def count_ledger_transactions(
        self, user_id: str, ledger_id: int, confirmed_only: bool = False
    ) -> int:
        """Count the user's transactions referencing a ledger."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self,
        user_id: str,
        name: str,
        account_number: Optional[str] = None,
        account_type: str = "savings",
        current_balance: Decimal = Decimal("0"),
        currency: str = "USD",
    ) -> int:
        """Create a bank account. Returns account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, user_id: str, account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_bank_accounts(
        self, user_id: str, include_inactive: bool = False
    ) -> list[BankAccount]:
        """List bank accounts, active only unless asked otherwise."""
        pass

    @abstractmethod
    def update_bank_account(
        self,
        user_id: str,
        account_id: int,
        name: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update bank account name or active flag."""
        pass

    @abstractmethod
    def delete_bank_account(self, user_id: str, account_id: int) -> None:
        """Delete a bank account."""
        pass

    # Contact operations
    @abstractmethod
    def create_contact(
        self,
        user_id: str,
        name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
    ) -> int:
        """Create a contact. Returns contact ID."""
        pass

    @abstractmethod
    def get_contact(self, user_id: str, contact_id: int) -> Optional[Contact]:
        """Get contact by ID."""
        pass

    @abstractmethod
    def list_contacts(self, user_id: str) -> list[Contact]:
        """List contacts sorted by name."""
        pass

    @abstractmethod
    def update_contact(self, user_id: str, contact_id: int, changes: dict[str, Any]) -> None:
        """Apply a patch of contact fields (details or cached totals)."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: str,
        date: date,
        description: str,
        amount: Decimal,
        direction: Direction,
        bank_account_id: Optional[int] = None,
        ledger_id: Optional[int] = None,
        narration: Optional[str] = None,
        state: TransactionState = TransactionState.IMPORTED,
        balance_after: Optional[Decimal] = None,
        contact_id: Optional[int] = None,
        related_transaction_id: Optional[int] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, user_id: str, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(
        self, user_id: str, transaction_id: int, changes: dict[str, Any]
    ) -> None:
        """Apply a patch of transaction fields."""
        pass

    @abstractmethod
    def delete_transaction(self, user_id: str, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        ledger_id: Optional[int] = None,
        bank_account_id: Optional[int] = None,
        cash_only: bool = False,
        confirmed_only: bool = False,
        state: Optional[TransactionState] = None,
        contact_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, newest date first, ties newest insert first."""
        pass

    # Pattern memory operations
    @abstractmethod
    def get_mapping(self, user_id: str, description: str) -> Optional[Mapping]:
        """Get the mapping learned for an exact description."""
        pass

    @abstractmethod
    def create_mapping(
        self,
        user_id: str,
        description: str,
        ledger_id: int,
        narration: Optional[str],
        confidence_score: float,
    ) -> int:
        """Create a mapping with usage_count 1. Returns mapping ID."""
        pass

    @abstractmethod
    def update_mapping(self, user_id: str, mapping_id: int, changes: dict[str, Any]) -> None:
        """Apply a patch of mapping fields."""
        pass

    @abstractmethod
    def list_mappings(self, user_id: str) -> list[Mapping]:
        """List mappings, most used first."""
        pass

    # Reminder operations
    @abstractmethod
    def create_reminder(
        self,
        user_id: str,
        due_date: date,
        amount: Decimal,
        message: str,
        reminder_type: str,
        channel: Optional[str] = None,
        transaction_id: Optional[int] = None,
        contact_id: Optional[int] = None,
    ) -> int:
        """Create a reminder in pending status. Returns reminder ID."""
        pass

    @abstractmethod
    def get_reminder(self, user_id: str, reminder_id: int) -> Optional[Reminder]:
        """Get reminder by ID."""
        pass

    @abstractmethod
    def update_reminder(self, user_id: str, reminder_id: int, changes: dict[str, Any]) -> None:
        """Apply a patch of reminder fields."""
        pass

    @abstractmethod
    def list_reminders(
        self, user_id: str, status: Optional[ReminderStatus] = None
    ) -> list[Reminder]:
        """List reminders by due date, earliest first."""
        pass
