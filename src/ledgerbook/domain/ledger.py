"""Ledger catalog domain service."""

from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Ledger, LedgerCategory
from ledgerbook.domain.errors import (
    DependencyError,
    DuplicateLedgerNameError,
    NotFoundError,
    ValidationError,
    duplicate_ledger_name,
    ledger_in_use,
    not_found,
)
from ledgerbook.utils.log import get_logger

logger = get_logger(__name__)

# Shared ledgers every user can pick from
SYSTEM_LEDGERS = [
    ("Sales", LedgerCategory.INCOME),
    ("Salary", LedgerCategory.INCOME),
    ("Interest Income", LedgerCategory.INCOME),
    ("Other Income", LedgerCategory.INCOME),
    ("Rent", LedgerCategory.EXPENSE),
    ("Groceries", LedgerCategory.EXPENSE),
    ("Utilities", LedgerCategory.EXPENSE),
    ("Transport", LedgerCategory.EXPENSE),
    ("Office Supplies", LedgerCategory.EXPENSE),
    ("Bank Charges", LedgerCategory.EXPENSE),
    ("Miscellaneous Expense", LedgerCategory.EXPENSE),
    ("Accounts Receivable", LedgerCategory.RECEIVABLE),
    ("Accounts Payable", LedgerCategory.PAYABLE),
    ("Cash", LedgerCategory.ASSET),
    ("Loan", LedgerCategory.LIABILITY),
    ("Owner's Capital", LedgerCategory.EQUITY),
]


class LedgerService:
    """Service for the ledger catalog."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_available_ledgers(self, user_id: str) -> list[Ledger]:
        """Return system ledgers plus the user's own, sorted by name."""
        return self.db.list_ledgers(user_id)

    def get_ledger(self, user_id: str, ledger_id: int) -> Optional[Ledger]:
        return self.db.get_ledger(user_id, ledger_id)

    def require_ledger(self, user_id: str, ledger_id: int) -> Ledger:
        ledger = self.db.get_ledger(user_id, ledger_id)
        if ledger is None:
            raise NotFoundError(not_found("Ledger", ledger_id))
        return ledger

    def find_ledger_by_name(self, user_id: str, name: str) -> Optional[Ledger]:
        """Find a visible ledger by name, ignoring case."""
        return self.db.find_ledger_by_name(user_id, name)

    def create_ledger(
        self, user_id: str, name: str, category: LedgerCategory | str
    ) -> Ledger:
        """Create a user-owned ledger.

        Names are compared case-insensitively against the user's own ledgers;
        a user ledger may shadow a system ledger of the same name.

        Raises:
            ValidationError: If the name is empty or the category is unknown
            DuplicateLedgerNameError: If the user already owns the name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Ledger name is required")
        try:
            category = LedgerCategory.parse(category)
        except ValueError as e:
            raise ValidationError(str(e))

        existing = self.db.find_ledger_by_name(user_id, name)
        if existing is not None and existing.user_id == user_id:
            raise DuplicateLedgerNameError(duplicate_ledger_name(name))

        ledger_id = self.db.create_ledger(user_id=user_id, name=name, category=category)
        return self.require_ledger(user_id, ledger_id)

    def ensure_ledger(
        self, user_id: str, name: str, category: Optional[LedgerCategory | str] = None
    ) -> Ledger:
        """Return the visible ledger called ``name``, creating it if needed.

        A concurrent insert of the same name is not an error: the ledger that
        won the race is returned.

        Raises:
            ValidationError: If the ledger is new and no category was given
        """
        existing = self.db.find_ledger_by_name(user_id, name)
        if existing is not None:
            return existing
        if category is None:
            raise ValidationError(f"Category is required to create new ledger '{name}'")

        try:
            ledger = self.create_ledger(user_id, name, category)
        except DuplicateLedgerNameError:
            logger.info("Ledger '%s' was created concurrently, reusing it", name)
            existing = self.db.find_ledger_by_name(user_id, name)
            if existing is None:
                raise
            return existing
        logger.info("Created ledger '%s' (%s) for user %s", ledger.name, ledger.category.value, user_id)
        return ledger

    def _require_own_ledger(self, user_id: str, ledger_id: int) -> Ledger:
        ledger = self.require_ledger(user_id, ledger_id)
        if ledger.is_system:
            raise ValidationError(f"System ledger '{ledger.name}' cannot be modified")
        return ledger

    def rename_ledger(self, user_id: str, ledger_id: int, name: str) -> None:
        """Rename a user ledger.

        Raises:
            ValidationError: For system ledgers or an empty name
            DuplicateLedgerNameError: If another own ledger has the name
        """
        ledger = self._require_own_ledger(user_id, ledger_id)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Ledger name is required")
        existing = self.db.find_ledger_by_name(user_id, name)
        if existing is not None and existing.user_id == user_id and existing.id != ledger.id:
            raise DuplicateLedgerNameError(duplicate_ledger_name(name))
        self.db.update_ledger(user_id, ledger_id, name=name)

    def change_category(
        self, user_id: str, ledger_id: int, category: LedgerCategory | str
    ) -> None:
        """Change the category of a ledger nobody has confirmed against yet.

        Raises:
            DependencyError: If confirmed transactions reference the ledger
        """
        self._require_own_ledger(user_id, ledger_id)
        try:
            category = LedgerCategory.parse(category)
        except ValueError as e:
            raise ValidationError(str(e))
        count = self.db.count_ledger_transactions(user_id, ledger_id, confirmed_only=True)
        if count > 0:
            raise DependencyError(
                f"{ledger_in_use(ledger_id, count)}; its category can no longer change"
            )
        self.db.update_ledger(user_id, ledger_id, category=category)

    def delete_ledger(self, user_id: str, ledger_id: int) -> None:
        """Delete an unused user ledger.

        Raises:
            DependencyError: If any transaction or learned pattern references it
        """
        self._require_own_ledger(user_id, ledger_id)
        count = self.db.count_ledger_transactions(user_id, ledger_id)
        if count > 0:
            raise DependencyError(f"Cannot delete ledger {ledger_id}: it has {count} transaction(s)")
        if any(m.ledger_id == ledger_id for m in self.db.list_mappings(user_id)):
            raise DependencyError(f"Cannot delete ledger {ledger_id}: learned patterns point to it")
        self.db.delete_ledger(user_id, ledger_id)

    def seed_system_ledgers(self) -> int:
        """Install the shared system ledgers. Safe to run repeatedly.

        Returns:
            Number of ledgers created
        """
        present = {ledger.name.lower() for ledger in self.db.list_system_ledgers()}
        created = 0
        for name, category in SYSTEM_LEDGERS:
            if name.lower() in present:
                continue
            self.db.create_ledger(user_id=None, name=name, category=category, is_system=True)
            created += 1
        return created
