"""CLI helpers for bank account and contact resolution."""

from __future__ import annotations

import click

from ledgerbook.domain.bank_account import BankAccountService
from ledgerbook.domain.contact import ContactService
from ledgerbook.utils.account_resolver import resolve_bank_account, resolve_contact


def resolve_bank_account_or_exit(
    ctx: click.Context, service: BankAccountService, user_id: str, account: str | int
) -> int:
    """Resolve bank account name or ID, or exit with a CLI error."""
    try:
        return resolve_bank_account(service, user_id, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_contact_or_exit(
    ctx: click.Context, service: ContactService, user_id: str, contact: str | int
) -> int:
    """Resolve contact name or ID, or exit with a CLI error."""
    try:
        return resolve_contact(service, user_id, contact)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
