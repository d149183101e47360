"""Bank account domain service."""

from decimal import Decimal
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import BankAccount
from ledgerbook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    not_found,
)


def mask_account_number(account_number: Optional[str]) -> Optional[str]:
    """Keep only the last four digits of an account number."""
    if not account_number:
        return None
    digits = "".join(ch for ch in account_number if ch.isalnum())
    if len(digits) <= 4:
        return digits
    return "*" * 4 + digits[-4:]


class BankAccountService:
    """Service for managing bank accounts."""

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        user_id: str,
        name: str,
        account_number: Optional[str] = None,
        account_type: str = "savings",
        opening_balance: Decimal = Decimal("0"),
        currency: str = "USD",
    ) -> int:
        """Create a new bank account.

        The opening balance is stored as the account's current balance.

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the user already has an account with that name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Bank account name is required")

        for acc in self.db.list_bank_accounts(user_id, include_inactive=True):
            if acc.name == name:
                raise ConflictError(f"Bank account with name '{name}' already exists")

        return self.db.create_bank_account(
            user_id=user_id,
            name=name,
            account_number=mask_account_number(account_number),
            account_type=account_type,
            current_balance=Decimal(opening_balance),
            currency=currency.upper(),
        )

    def get_account(self, user_id: str, account_id: int) -> Optional[BankAccount]:
        return self.db.get_bank_account(user_id, account_id)

    def require_account(self, user_id: str, account_id: int) -> BankAccount:
        account = self.db.get_bank_account(user_id, account_id)
        if account is None:
            raise NotFoundError(not_found("Bank account", account_id))
        return account

    def list_accounts(self, user_id: str, include_inactive: bool = False) -> list[BankAccount]:
        return self.db.list_bank_accounts(user_id, include_inactive=include_inactive)

    def rename_account(self, user_id: str, account_id: int, name: str) -> None:
        """Rename an account.

        Raises:
            NotFoundError: If the account does not exist
            ConflictError: If another account already has the name
        """
        self.require_account(user_id, account_id)
        for acc in self.db.list_bank_accounts(user_id, include_inactive=True):
            if acc.id != account_id and acc.name == name:
                raise ConflictError(f"Bank account with name '{name}' already exists")
        self.db.update_bank_account(user_id, account_id, name=name)

    def deactivate_account(self, user_id: str, account_id: int) -> None:
        """Hide an account from balances without losing its history."""
        self.require_account(user_id, account_id)
        self.db.update_bank_account(user_id, account_id, is_active=False)

    def delete_account(self, user_id: str, account_id: int) -> None:
        """Delete an account that has no transactions.

        Raises:
            DependencyError: If transactions still reference the account
        """
        self.require_account(user_id, account_id)
        count = len(self.db.list_transactions(user_id, bank_account_id=account_id))
        if count > 0:
            raise DependencyError(account_delete_blocked(account_id, count))
        self.db.delete_bank_account(user_id, account_id)
