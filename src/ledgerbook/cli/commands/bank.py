"""Bank account management commands."""

import click

from ledgerbook.cli.account_resolution import resolve_bank_account_or_exit
from ledgerbook.cli.context import get_db, get_user
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.bank_account import BankAccountService
from ledgerbook.utils.amount_parser import parse_amount


@click.group()
def bank_group():
    """Manage bank accounts."""
    pass


@bank_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--number", help="Account number (only the last four digits are kept)")
@click.option("--type", "account_type", default="savings", show_default=True, help="Account type")
@click.option("--balance", default="0", help="Current balance of the account")
@click.option("--currency", default="USD", show_default=True)
@click.pass_context
def create_account(
    ctx, name: str, number: str | None, account_type: str, balance: str, currency: str
):
    """Create a bank account.

    Examples:
        ledgerbook bank create "HDFC Current" --number 50100012345678 --balance 25000
        ledgerbook bank create "Petty Savings" --type savings
    """
    service = BankAccountService(get_db(ctx))
    try:
        opening = parse_amount(balance)
        account_id = service.create_account(
            get_user(ctx),
            name,
            account_number=number,
            account_type=account_type,
            opening_balance=opening,
            currency=currency,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created bank account '{name}' (ID: {account_id})")


@bank_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List bank accounts."""
    service = BankAccountService(get_db(ctx))
    accounts = service.list_accounts(get_user(ctx), include_inactive=include_inactive)
    if not accounts:
        click.echo("No bank accounts found.")
        return

    click.echo("\nBank accounts:")
    click.echo("-" * 70)
    for acc in accounts:
        number = acc.account_number or "-"
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {number:10s} | "
            f"{acc.current_balance:>12,.2f} {acc.currency}{status}"
        )


@bank_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, account: str, new_name: str):
    """Rename a bank account. ACCOUNT can be a name or ID."""
    service = BankAccountService(get_db(ctx))
    user_id = get_user(ctx)
    account_id = resolve_bank_account_or_exit(ctx, service, user_id, account)
    try:
        service.rename_account(user_id, account_id, new_name)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Renamed bank account to '{new_name}'")


@bank_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str):
    """Hide a bank account from balances, keeping its transactions."""
    service = BankAccountService(get_db(ctx))
    user_id = get_user(ctx)
    account_id = resolve_bank_account_or_exit(ctx, service, user_id, account)
    service.deactivate_account(user_id, account_id)
    click.echo(f"Deactivated bank account {account_id}")


@bank_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str):
    """Delete a bank account that has no transactions."""
    service = BankAccountService(get_db(ctx))
    user_id = get_user(ctx)
    account_id = resolve_bank_account_or_exit(ctx, service, user_id, account)
    try:
        service.delete_account(user_id, account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted bank account {account_id}")


def register_commands(cli):
    """Register bank account commands with main CLI."""
    cli.add_command(bank_group, name="bank")
