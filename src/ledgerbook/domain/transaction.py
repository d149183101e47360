"""Transaction lifecycle domain service.

A transaction starts out Imported, may pick up a Suggested ledger, and ends
Confirmed once the user settles on a ledger. Confirmation is where the engine
learns: it creates the ledger if needed, records the description in pattern
memory and bumps the counterparty's running total.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.contact import ContactService
from ledgerbook.domain.entities import (
    Direction,
    LedgerCategory,
    RawTransaction,
    Suggestion,
    Transaction,
    TransactionState,
)
from ledgerbook.domain.errors import (
    ImmutableFieldError,
    InvalidTransitionError,
    MissingLedgerError,
    NotFoundError,
    ValidationError,
    invalid_transition,
    not_found,
)
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.pattern_memory import PatternMemoryService
from ledgerbook.domain.suggestion import SuggestionResolver
from ledgerbook.utils.amount_parser import round_to_cents
from ledgerbook.utils.log import get_logger

logger = get_logger(__name__)

# Fields that stay editable after confirmation
EDITABLE_AFTER_CONFIRM = frozenset({"narration", "ledger_name", "category"})

_CLEARED_SUGGESTION = {
    "suggested_ledger_name": None,
    "suggested_category": None,
    "suggestion_confidence": None,
    "ai_suggested": False,
}


def _positive_amount(amount) -> Decimal:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid amount '{amount}'") from e
    # Rounded before the check so sub-cent amounts can't be stored as 0.00
    if not value.is_finite() or round_to_cents(value) <= 0:
        raise ValidationError("Amount must be greater than zero; use the direction for the sign")
    return round_to_cents(value)


def _required_text(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field} is required")
    return value


class TransactionService:
    """Service for recording, categorizing and confirming transactions."""

    def __init__(self, db: Database, resolver: Optional[SuggestionResolver] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            resolver: Suggestion resolver; defaults to pattern memory only
        """
        self.db = db
        self.resolver = resolver or SuggestionResolver(db)
        self.ledgers = LedgerService(db)
        self.memory = PatternMemoryService(db)
        self.contacts = ContactService(db)

    def create_transaction(
        self,
        user_id: str,
        date: date,
        description: str,
        amount: Decimal,
        direction: Direction | str,
        bank_account_id: Optional[int] = None,
        narration: Optional[str] = None,
        balance_after: Optional[Decimal] = None,
        contact_id: Optional[int] = None,
        related_transaction_id: Optional[int] = None,
        ledger_name: Optional[str] = None,
        category: Optional[LedgerCategory | str] = None,
    ) -> Transaction:
        """Record a transaction in the Imported state.

        Manual entries that already know their ledger pass ``ledger_name`` and
        are confirmed straight away.

        Args:
            user_id: Owner of the transaction
            date: Transaction date
            description: Raw description, used as the pattern memory key
            amount: Positive magnitude
            direction: credit (money in) or debit (money out)
            bank_account_id: Bank account, or None for a cash transaction
            narration: Optional human-readable note
            balance_after: Running balance reported by the bank, if any
            contact_id: Optional counterparty
            related_transaction_id: Optional reciprocal transaction
            ledger_name: Confirm immediately to this ledger
            category: Category used if ``ledger_name`` is new

        Returns:
            The stored transaction

        Raises:
            ValidationError: If a required field is missing or the amount is not positive
            NotFoundError: If the bank account, contact or related transaction doesn't exist
        """
        description = _required_text(description, "Description")
        amount = _positive_amount(amount)
        if date is None:
            raise ValidationError("Date is required")
        try:
            direction = Direction(direction)
        except ValueError as e:
            raise ValidationError(f"Invalid direction '{direction}'") from e

        if bank_account_id is not None and self.db.get_bank_account(user_id, bank_account_id) is None:
            raise NotFoundError(not_found("Bank account", bank_account_id))
        if contact_id is not None:
            self.contacts.require_contact(user_id, contact_id)
        if related_transaction_id is not None:
            self.require_transaction(user_id, related_transaction_id)

        # A failed immediate confirmation leaves no Imported row behind
        with self.db.atomic():
            transaction_id = self.db.create_transaction(
                user_id=user_id,
                date=date,
                description=description,
                amount=amount,
                direction=direction,
                bank_account_id=bank_account_id,
                narration=narration,
                balance_after=balance_after,
                contact_id=contact_id,
                related_transaction_id=related_transaction_id,
            )
            if ledger_name:
                return self.confirm_transaction(
                    user_id, transaction_id, ledger_name=ledger_name, narration=narration, category=category
                )
        return self.require_transaction(user_id, transaction_id)

    def import_transactions(
        self,
        user_id: str,
        rows: Iterable[RawTransaction],
        bank_account_id: Optional[int] = None,
        suggest: bool = True,
    ) -> list[Transaction]:
        """Store already-parsed statement rows and try to categorize each one.

        A row without a suggestion simply stays Imported.

        Returns:
            The stored transactions, in input order
        """
        known_names = None
        if suggest:
            known_names = [ledger.name for ledger in self.ledgers.list_available_ledgers(user_id)]

        imported = []
        for row in rows:
            transaction = self.create_transaction(
                user_id=user_id,
                date=row.date,
                description=row.description,
                amount=row.amount,
                direction=row.direction,
                bank_account_id=bank_account_id,
                balance_after=row.balance_after,
            )
            if suggest:
                self._attach_suggestion(transaction, known_names)
                transaction = self.require_transaction(user_id, transaction.id)
            imported.append(transaction)

        logger.info("Imported %d transactions for user %s", len(imported), user_id)
        return imported

    def get_transaction(self, user_id: str, transaction_id: int) -> Optional[Transaction]:
        return self.db.get_transaction(user_id, transaction_id)

    def require_transaction(self, user_id: str, transaction_id: int) -> Transaction:
        transaction = self.db.get_transaction(user_id, transaction_id)
        if transaction is None:
            raise NotFoundError(not_found("Transaction", transaction_id))
        return transaction

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
        """List transactions, newest date first."""
        return self.db.list_transactions(
            user_id,
            start_date=start_date,
            end_date=end_date,
            ledger_id=ledger_id,
            bank_account_id=bank_account_id,
            cash_only=cash_only,
            confirmed_only=confirmed_only,
            state=state,
            contact_id=contact_id,
            limit=limit,
        )

    def suggest_for_transaction(self, user_id: str, transaction_id: int) -> Optional[Suggestion]:
        """Ask the resolver for a ledger and attach it to the transaction.

        Returns:
            The suggestion, or None if nothing matched

        Raises:
            InvalidTransitionError: If the transaction is already confirmed
        """
        transaction = self.require_transaction(user_id, transaction_id)
        if transaction.is_confirmed:
            raise InvalidTransitionError(
                invalid_transition(
                    "Transaction",
                    transaction_id,
                    transaction.state.value,
                    TransactionState.SUGGESTED.value,
                )
            )
        return self._attach_suggestion(transaction)

    def _attach_suggestion(
        self, transaction: Transaction, known_names: Optional[list[str]] = None
    ) -> Optional[Suggestion]:
        suggestion = self.resolver.suggest(transaction, known_names)
        if suggestion is None:
            return None
        self.db.update_transaction(
            transaction.user_id,
            transaction.id,
            {
                "suggested_ledger_name": suggestion.ledger_name,
                "suggested_category": suggestion.category,
                "narration": suggestion.narration,
                "ai_suggested": suggestion.source == "ai",
                "suggestion_confidence": suggestion.confidence,
                "state": TransactionState.SUGGESTED,
            },
        )
        return suggestion

    def confirm_transaction(
        self,
        user_id: str,
        transaction_id: int,
        ledger_name: Optional[str] = None,
        narration: Optional[str] = None,
        category: Optional[LedgerCategory | str] = None,
        contact_id: Optional[int] = None,
    ) -> Transaction:
        """Confirm a transaction against a ledger.

        Without ``ledger_name`` the attached suggestion is accepted. A ledger
        name the user doesn't have yet is created first; ``category`` is needed
        for that unless the suggestion supplies it.

        Args:
            user_id: Owner of the transaction
            transaction_id: Transaction to confirm
            ledger_name: Ledger to file the transaction under
            narration: Narration to keep; defaults to the current one
            category: Category for a newly created ledger
            contact_id: Counterparty for receivable/payable ledgers

        Returns:
            The confirmed transaction

        Raises:
            MissingLedgerError: If no ledger was given and none was suggested
            InvalidTransitionError: If the transaction is already confirmed
            ValidationError: If a new ledger has no category
        """
        transaction = self.require_transaction(user_id, transaction_id)
        if transaction.is_confirmed:
            raise InvalidTransitionError(
                invalid_transition(
                    "Transaction",
                    transaction_id,
                    transaction.state.value,
                    TransactionState.CONFIRMED.value,
                )
            )

        name = (ledger_name or transaction.suggested_ledger_name or "").strip()
        if not name:
            raise MissingLedgerError(f"Transaction {transaction_id} needs a ledger to be confirmed")
        if category is None and name.lower() == (transaction.suggested_ledger_name or "").lower():
            category = transaction.suggested_category

        contact_id = contact_id if contact_id is not None else transaction.contact_id
        if contact_id is not None:
            self.contacts.require_contact(user_id, contact_id)

        narration = narration or transaction.narration or transaction.description
        hint = transaction.suggestion_confidence if transaction.ai_suggested else None

        with self.db.atomic():
            ledger = self.ledgers.ensure_ledger(user_id, name, category)
            self.db.update_transaction(
                user_id,
                transaction_id,
                {
                    "ledger_id": ledger.id,
                    "narration": narration,
                    "is_confirmed": True,
                    "is_reconciled": True,
                    "state": TransactionState.CONFIRMED,
                    "contact_id": contact_id,
                },
            )
            self.memory.record(
                user_id,
                transaction.description,
                ledger.id,
                narration=narration,
                confidence_hint=hint,
            )
            if contact_id is not None and ledger.category in (
                LedgerCategory.RECEIVABLE,
                LedgerCategory.PAYABLE,
            ):
                self.contacts.apply_confirmed_amount(
                    user_id, contact_id, ledger.category, transaction.amount
                )

        logger.info("Confirmed transaction %s to ledger '%s'", transaction_id, ledger.name)
        return self.require_transaction(user_id, transaction_id)

    def edit_confirmed(
        self,
        user_id: str,
        transaction_id: int,
        ledger_name: Optional[str] = None,
        narration: Optional[str] = None,
        category: Optional[LedgerCategory | str] = None,
    ) -> Transaction:
        """Correct the ledger or narration of a confirmed transaction in place.

        Pattern memory and contact totals are left as they are.

        Raises:
            InvalidTransitionError: If the transaction isn't confirmed yet
        """
        transaction = self.require_transaction(user_id, transaction_id)
        if not transaction.is_confirmed:
            raise InvalidTransitionError(
                f"Transaction {transaction_id} is not confirmed; confirm it instead"
            )

        changes = {}
        with self.db.atomic():
            if ledger_name:
                changes["ledger_id"] = self.ledgers.ensure_ledger(user_id, ledger_name, category).id
            if narration is not None:
                changes["narration"] = narration
            if changes:
                self.db.update_transaction(user_id, transaction_id, changes)
        return self.require_transaction(user_id, transaction_id)

    def update_transaction(self, user_id: str, transaction_id: int, **changes) -> Transaction:
        """Edit fields of a transaction.

        Unconfirmed transactions accept any field. Changing the description
        drops the attached suggestion and returns the transaction to Imported.
        Confirmed transactions only accept ledger and narration edits.

        Raises:
            ImmutableFieldError: If a locked field of a confirmed transaction is changed
            ValidationError: If a field is unknown or invalid
        """
        transaction = self.require_transaction(user_id, transaction_id)
        changes = {k: v for k, v in changes.items() if v is not None}

        if transaction.is_confirmed:
            locked = sorted(set(changes) - EDITABLE_AFTER_CONFIRM)
            if locked:
                raise ImmutableFieldError(
                    f"Cannot change {', '.join(locked)} of confirmed transaction {transaction_id}"
                )
            return self.edit_confirmed(user_id, transaction_id, **changes)

        patch = {}
        for field, value in changes.items():
            if field == "amount":
                patch["amount"] = _positive_amount(value)
            elif field == "direction":
                try:
                    patch["direction"] = Direction(value)
                except ValueError as e:
                    raise ValidationError(f"Invalid direction '{value}'") from e
            elif field == "description":
                patch["description"] = _required_text(value, "Description")
            elif field == "bank_account_id":
                if self.db.get_bank_account(user_id, value) is None:
                    raise NotFoundError(not_found("Bank account", value))
                patch["bank_account_id"] = value
            elif field == "contact_id":
                self.contacts.require_contact(user_id, value)
                patch["contact_id"] = value
            elif field in ("date", "narration", "balance_after", "related_transaction_id"):
                patch[field] = value
            else:
                raise ValidationError(f"Unknown transaction field '{field}'")

        if patch.get("description", transaction.description) != transaction.description:
            patch.update(_CLEARED_SUGGESTION)
            patch["state"] = TransactionState.IMPORTED

        if patch:
            self.db.update_transaction(user_id, transaction_id, patch)
        return self.require_transaction(user_id, transaction_id)

    def delete_transaction(self, user_id: str, transaction_id: int) -> None:
        """Delete a transaction.

        Contact totals built from a confirmed transaction are not reversed;
        ``ContactService.recompute_contact_totals`` rebuilds them.
        """
        transaction = self.require_transaction(user_id, transaction_id)
        if transaction.is_confirmed and transaction.contact_id is not None:
            logger.warning(
                "Deleting confirmed transaction %s leaves contact %s totals stale",
                transaction_id,
                transaction.contact_id,
            )
        self.db.delete_transaction(user_id, transaction_id)
