"""Utilities for resolving bank account and contact names to IDs."""

from ledgerbook.domain.bank_account import BankAccountService
from ledgerbook.domain.contact import ContactService


def _lookup(kind: str, value: str | int, by_id, candidates) -> int:
    if isinstance(value, int) or str(value).strip().isdigit():
        entity_id = int(value)
        if by_id(entity_id) is None:
            raise ValueError(f"{kind} ID {entity_id} not found")
        return entity_id

    for item in candidates():
        if item.name == value:
            return item.id
    raise ValueError(f"{kind} '{value}' not found")


def resolve_bank_account(service: BankAccountService, user_id: str, account: str | int) -> int:
    """Resolve a bank account name or ID to an account ID.

    Args:
        service: BankAccountService instance
        user_id: Owner of the account
        account: Account name, or ID (int or numeric string)

    Returns:
        Account ID

    Raises:
        ValueError: If the account is not found
    """
    return _lookup(
        "Bank account",
        account,
        lambda account_id: service.get_account(user_id, account_id),
        lambda: service.list_accounts(user_id, include_inactive=True),
    )


def resolve_contact(service: ContactService, user_id: str, contact: str | int) -> int:
    """Resolve a contact name or ID to a contact ID."""
    return _lookup(
        "Contact",
        contact,
        lambda contact_id: service.get_contact(user_id, contact_id),
        lambda: service.list_contacts(user_id),
    )
