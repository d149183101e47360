"""Contact domain service."""

from decimal import Decimal
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.balance import category_index, contact_totals
from ledgerbook.domain.entities import Contact, LedgerCategory
from ledgerbook.domain.errors import NotFoundError, ValidationError, not_found


class ContactService:
    """Service for counterparties and their cached running totals."""

    def __init__(self, db: Database):
        """Initialize contact service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_contact(
        self,
        user_id: str,
        name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
    ) -> int:
        """Create a contact.

        Raises:
            ValidationError: If the name is empty
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Contact name is required")
        return self.db.create_contact(user_id=user_id, name=name, phone=phone, email=email)

    def get_contact(self, user_id: str, contact_id: int) -> Optional[Contact]:
        return self.db.get_contact(user_id, contact_id)

    def require_contact(self, user_id: str, contact_id: int) -> Contact:
        contact = self.db.get_contact(user_id, contact_id)
        if contact is None:
            raise NotFoundError(not_found("Contact", contact_id))
        return contact

    def list_contacts(self, user_id: str) -> list[Contact]:
        return self.db.list_contacts(user_id)

    def update_details(
        self,
        user_id: str,
        contact_id: int,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
    ) -> None:
        """Update contact details. Fields left as None are unchanged."""
        self.require_contact(user_id, contact_id)
        changes = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Contact name is required")
            changes["name"] = name.strip()
        if phone is not None:
            changes["phone"] = phone
        if email is not None:
            changes["email"] = email
        if changes:
            self.db.update_contact(user_id, contact_id, changes)

    def apply_confirmed_amount(
        self, user_id: str, contact_id: int, category: LedgerCategory, amount: Decimal
    ) -> None:
        """Add a confirmed receivable/payable amount to the contact's running total."""
        contact = self.require_contact(user_id, contact_id)
        if category is LedgerCategory.RECEIVABLE:
            self.db.update_contact(
                user_id, contact_id, {"total_receivable": contact.total_receivable + amount}
            )
        elif category is LedgerCategory.PAYABLE:
            self.db.update_contact(
                user_id, contact_id, {"total_payable": contact.total_payable + amount}
            )

    def recompute_contact_totals(self, user_id: str) -> list[Contact]:
        """Rebuild every contact's cached totals from confirmed transactions.

        Returns:
            Contacts after the rebuild
        """
        categories = category_index(self.db.list_ledgers(user_id))
        totals = contact_totals(self.db.list_transactions(user_id, confirmed_only=True), categories)
        with self.db.atomic():
            for contact in self.db.list_contacts(user_id):
                receivable, payable = totals.get(contact.id, (Decimal("0"), Decimal("0")))
                if (receivable, payable) != (contact.total_receivable, contact.total_payable):
                    self.db.update_contact(
                        user_id,
                        contact.id,
                        {"total_receivable": receivable, "total_payable": payable},
                    )
        return self.db.list_contacts(user_id)
