"""Add transaction command."""

import click

from ledgerbook.cli.account_resolution import resolve_bank_account_or_exit, resolve_contact_or_exit
from ledgerbook.cli.context import get_db, get_user
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.bank_account import BankAccountService
from ledgerbook.domain.contact import ContactService
from ledgerbook.domain.entities import Direction, LedgerCategory
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount, split_signed_amount
from ledgerbook.utils.date_parser import parse_date


@click.command("add")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Amount (e.g., 123.45; negative means money out)")
@click.option(
    "--direction",
    type=click.Choice([d.value for d in Direction], case_sensitive=False),
    help="credit (money in) or debit (money out); defaults to the amount's sign",
)
@click.option("--description", required=True, help="Transaction description")
@click.option("--bank", help="Bank account name or ID (omit for cash)")
@click.option("--ledger", help="Confirm straight away to this ledger")
@click.option(
    "--category",
    type=click.Choice([c.value for c in LedgerCategory], case_sensitive=False),
    help="Category, if --ledger names a new ledger",
)
@click.option("--narration", help="Narration")
@click.option("--contact", help="Contact name or ID")
@click.pass_context
def add_transaction(
    ctx,
    date: str,
    amount: str,
    direction: str | None,
    description: str,
    bank: str | None,
    ledger: str | None,
    category: str | None,
    narration: str | None,
    contact: str | None,
):
    """Add a transaction manually.

    Examples:
        ledgerbook add --amount -50.00 --description "Tea stall"
        ledgerbook add --bank "HDFC Current" --amount 1200 --description "NEFT ACME" --ledger Sales
    """
    db = get_db(ctx)
    user_id = get_user(ctx)
    service = TransactionService(db)

    bank_account_id = None
    if bank is not None:
        bank_account_id = resolve_bank_account_or_exit(ctx, BankAccountService(db), user_id, bank)
    contact_id = None
    if contact is not None:
        contact_id = resolve_contact_or_exit(ctx, ContactService(db), user_id, contact)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        magnitude, signed_direction = split_signed_amount(parse_amount(amount))
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction = service.create_transaction(
            user_id=user_id,
            date=txn_date,
            description=description,
            amount=magnitude,
            direction=Direction(direction.lower()) if direction else signed_direction,
            bank_account_id=bank_account_id,
            narration=narration,
            contact_id=contact_id,
            ledger_name=ledger,
            category=category,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created transaction {transaction.id}")
    click.echo(f"  Date: {transaction.date}")
    click.echo(f"  Amount: {transaction.amount:,.2f} ({transaction.direction.value})")
    click.echo(f"  Account: {'cash' if transaction.is_cash else bank}")
    click.echo(f"  Description: {transaction.description}")
    if transaction.is_confirmed:
        click.echo(f"  Ledger: {ledger} (confirmed)")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
