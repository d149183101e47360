"""Mapper functions to convert SQLAlchemy rows into domain entities."""

from decimal import Decimal

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Ledger as ORMLedger,
    BankAccount as ORMBankAccount,
    Contact as ORMContact,
    Transaction as ORMTransaction,
    Mapping as ORMMapping,
    Reminder as ORMReminder,
)


def _decimal(value) -> Decimal:
    return Decimal(value if value is not None else 0)


def ledger_to_domain(orm_ledger: ORMLedger) -> domain.Ledger:
    return domain.Ledger(
        id=orm_ledger.id,
        name=orm_ledger.name,
        category=domain.LedgerCategory(orm_ledger.category),
        user_id=orm_ledger.user_id,
        is_system=orm_ledger.is_system,
        created_at=orm_ledger.created_at,
    )


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    return domain.BankAccount(
        id=orm_account.id,
        user_id=orm_account.user_id,
        name=orm_account.name,
        account_number=orm_account.account_number,
        account_type=orm_account.account_type,
        current_balance=_decimal(orm_account.current_balance),
        is_active=orm_account.is_active,
        currency=orm_account.currency,
        created_at=orm_account.created_at,
    )


def contact_to_domain(orm_contact: ORMContact) -> domain.Contact:
    return domain.Contact(
        id=orm_contact.id,
        user_id=orm_contact.user_id,
        name=orm_contact.name,
        phone=orm_contact.phone,
        email=orm_contact.email,
        total_receivable=_decimal(orm_contact.total_receivable),
        total_payable=_decimal(orm_contact.total_payable),
        created_at=orm_contact.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    balance_after = orm_transaction.balance_after
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        bank_account_id=orm_transaction.bank_account_id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        amount=_decimal(orm_transaction.amount),
        direction=domain.Direction(orm_transaction.direction),
        ledger_id=orm_transaction.ledger_id,
        narration=orm_transaction.narration,
        state=domain.TransactionState(orm_transaction.state),
        is_confirmed=orm_transaction.is_confirmed,
        is_reconciled=orm_transaction.is_reconciled,
        ai_suggested=orm_transaction.ai_suggested,
        suggestion_confidence=orm_transaction.suggestion_confidence,
        suggested_ledger_name=orm_transaction.suggested_ledger_name,
        suggested_category=(
            domain.LedgerCategory(orm_transaction.suggested_category)
            if orm_transaction.suggested_category
            else None
        ),
        balance_after=Decimal(balance_after) if balance_after is not None else None,
        contact_id=orm_transaction.contact_id,
        related_transaction_id=orm_transaction.related_transaction_id,
        created_at=orm_transaction.created_at,
    )


def mapping_to_domain(orm_mapping: ORMMapping) -> domain.Mapping:
    return domain.Mapping(
        id=orm_mapping.id,
        user_id=orm_mapping.user_id,
        description=orm_mapping.description,
        ledger_id=orm_mapping.ledger_id,
        narration=orm_mapping.narration,
        usage_count=orm_mapping.usage_count,
        confidence_score=orm_mapping.confidence_score,
        last_used_at=orm_mapping.last_used_at,
        created_at=orm_mapping.created_at,
    )


def reminder_to_domain(orm_reminder: ORMReminder) -> domain.Reminder:
    return domain.Reminder(
        id=orm_reminder.id,
        user_id=orm_reminder.user_id,
        transaction_id=orm_reminder.transaction_id,
        contact_id=orm_reminder.contact_id,
        due_date=orm_reminder.due_date,
        amount=_decimal(orm_reminder.amount),
        message=orm_reminder.message,
        reminder_type=domain.ReminderType(orm_reminder.reminder_type),
        status=domain.ReminderStatus(orm_reminder.status),
        channel=domain.DeliveryChannel(orm_reminder.channel) if orm_reminder.channel else None,
        sent_at=orm_reminder.sent_at,
        created_at=orm_reminder.created_at,
    )
