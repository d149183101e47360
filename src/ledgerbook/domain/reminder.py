"""Reminder lifecycle domain service."""

from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    DeliveryChannel,
    Reminder,
    ReminderStatus,
    ReminderType,
)
from ledgerbook.domain.errors import (
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    invalid_transition,
    not_found,
)
from ledgerbook.utils.amount_parser import round_to_cents
from ledgerbook.utils.log import get_logger

logger = get_logger(__name__)

# Allowed moves; completed and cancelled are terminal
TRANSITIONS = {
    ReminderStatus.PENDING: {ReminderStatus.SENT, ReminderStatus.COMPLETED, ReminderStatus.CANCELLED},
    ReminderStatus.SENT: {ReminderStatus.COMPLETED, ReminderStatus.CANCELLED},
    ReminderStatus.COMPLETED: set(),
    ReminderStatus.CANCELLED: set(),
}


def is_overdue(reminder: Reminder, today: Optional[date] = None) -> bool:
    """True only for pending reminders due strictly before today."""
    today = today or date.today()
    return reminder.status is ReminderStatus.PENDING and reminder.due_date < today


class ReminderService:
    """Service for payment reminders."""

    def __init__(self, db: Database):
        """Initialize reminder service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_reminder(
        self,
        user_id: str,
        due_date: date,
        amount: Decimal,
        message: str,
        reminder_type: ReminderType | str,
        channel: Optional[DeliveryChannel | str] = None,
        transaction_id: Optional[int] = None,
        contact_id: Optional[int] = None,
    ) -> Reminder:
        """Create a pending reminder.

        Args:
            user_id: Owner of the reminder
            due_date: Date the money is due
            amount: Positive amount due
            message: Text to send
            reminder_type: receivable or payable
            channel: Optional delivery channel (sms, whatsapp, email)
            transaction_id: Optional transaction the reminder is about
            contact_id: Optional counterparty

        Returns:
            The stored reminder

        Raises:
            ValidationError: If a required field is missing or invalid
            NotFoundError: If the transaction or contact doesn't exist
        """
        if due_date is None:
            raise ValidationError("Due date is required")
        try:
            amount = Decimal(str(amount))
        except InvalidOperation as e:
            raise ValidationError(f"Invalid amount '{amount}'") from e
        if not amount.is_finite() or round_to_cents(amount) <= 0:
            raise ValidationError("Reminder amount must be greater than zero")
        amount = round_to_cents(amount)
        message = (message or "").strip()
        if not message:
            raise ValidationError("Reminder message is required")
        if reminder_type is None:
            raise ValidationError("Reminder type is required")
        try:
            reminder_type = ReminderType(reminder_type)
            channel = DeliveryChannel(channel) if channel else None
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if transaction_id is not None and self.db.get_transaction(user_id, transaction_id) is None:
            raise NotFoundError(not_found("Transaction", transaction_id))
        if contact_id is not None and self.db.get_contact(user_id, contact_id) is None:
            raise NotFoundError(not_found("Contact", contact_id))

        reminder_id = self.db.create_reminder(
            user_id=user_id,
            due_date=due_date,
            amount=amount,
            message=message,
            reminder_type=reminder_type.value,
            channel=channel.value if channel else None,
            transaction_id=transaction_id,
            contact_id=contact_id,
        )
        return self.require_reminder(user_id, reminder_id)

    def get_reminder(self, user_id: str, reminder_id: int) -> Optional[Reminder]:
        return self.db.get_reminder(user_id, reminder_id)

    def require_reminder(self, user_id: str, reminder_id: int) -> Reminder:
        reminder = self.db.get_reminder(user_id, reminder_id)
        if reminder is None:
            raise NotFoundError(not_found("Reminder", reminder_id))
        return reminder

    def _transition(
        self, user_id: str, reminder_id: int, target: ReminderStatus, changes: Optional[dict] = None
    ) -> Reminder:
        reminder = self.require_reminder(user_id, reminder_id)
        if target not in TRANSITIONS[reminder.status]:
            raise InvalidTransitionError(
                invalid_transition("Reminder", reminder_id, reminder.status.value, target.value)
            )
        patch = {"status": target}
        patch.update(changes or {})
        self.db.update_reminder(user_id, reminder_id, patch)
        logger.info("Reminder %s: %s -> %s", reminder_id, reminder.status.value, target.value)
        return self.require_reminder(user_id, reminder_id)

    def mark_sent(
        self,
        user_id: str,
        reminder_id: int,
        channel: Optional[DeliveryChannel | str] = None,
        sent_at: Optional[datetime] = None,
    ) -> Reminder:
        """Record that a pending reminder was dispatched.

        Raises:
            ValidationError: If neither the reminder nor the call names a channel
            InvalidTransitionError: If the reminder isn't pending
        """
        reminder = self.require_reminder(user_id, reminder_id)
        try:
            channel = DeliveryChannel(channel) if channel else reminder.channel
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if channel is None:
            raise ValidationError(f"Reminder {reminder_id} has no delivery channel")
        return self._transition(
            user_id,
            reminder_id,
            ReminderStatus.SENT,
            {"channel": channel, "sent_at": sent_at or datetime.now(UTC)},
        )

    def complete(self, user_id: str, reminder_id: int) -> Reminder:
        return self._transition(user_id, reminder_id, ReminderStatus.COMPLETED)

    def cancel(self, user_id: str, reminder_id: int) -> Reminder:
        return self._transition(user_id, reminder_id, ReminderStatus.CANCELLED)

    def list_reminders(
        self, user_id: str, status: Optional[ReminderStatus | str] = None
    ) -> list[Reminder]:
        """List reminders, earliest due date first."""
        return self.db.list_reminders(user_id, status=ReminderStatus(status) if status else None)

    def list_overdue(self, user_id: str, today: Optional[date] = None) -> list[Reminder]:
        today = today or date.today()
        return [
            r
            for r in self.db.list_reminders(user_id, status=ReminderStatus.PENDING)
            if is_overdue(r, today)
        ]
