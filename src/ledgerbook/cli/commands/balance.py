"""Balance and dashboard commands."""

from datetime import date

import click

from ledgerbook.cli.context import get_db, get_user
from ledgerbook.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from ledgerbook.domain.balance import BalanceService, trailing_window
from ledgerbook.domain.bank_account import BankAccountService


def _row(label: str, amount) -> str:
    return f"  {label:22s} {amount:>14,.2f}"


@click.command("balance")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--days", type=int, default=30, show_default=True, help="Trailing window when no dates are given")
@click.option("--by-ledger", is_flag=True, help="Break expenses down by ledger")
@click.pass_context
def balance(ctx, start_date: str | None, end_date: str | None, days: int, by_ledger: bool, **period_kwargs):
    """Show balances, income and expense, receivables and payables.

    Income and expense cover the chosen window (the last 30 days by
    default); balances, receivables and payables are all-time.

    Examples:
        ledgerbook balance
        ledgerbook balance --this-month --by-ledger
    """
    db = get_db(ctx)
    user_id = get_user(ctx)
    service = BalanceService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(period_kwargs),
        default_range=trailing_window(date.today(), days),
    )
    summary = service.summary(user_id, start, end)

    window = f"{start or 'beginning'} to {end or 'today'}"
    click.echo(f"\nSummary ({window})")
    click.echo("=" * 40)
    accounts = {a.id: a.name for a in BankAccountService(db).list_accounts(user_id)}
    for account_id, amount in summary.bank_balances.items():
        click.echo(_row(accounts.get(account_id, str(account_id))[:22], amount))
    click.echo(_row("Bank total", summary.bank_total))
    click.echo(_row("Cash", summary.cash_balance))
    click.echo("-" * 40)
    click.echo(_row("Income", summary.income))
    click.echo(_row("Expense", summary.expense))
    click.echo(_row("Net", summary.net))
    click.echo("-" * 40)
    click.echo(_row("Receivables", summary.receivables))
    click.echo(_row("Payables", summary.payables))
    click.echo(f"\n  {summary.transaction_count} confirmed transactions in window")

    if by_ledger:
        rows = service.expense_by_category(user_id, start, end)
        click.echo("\nExpenses by ledger")
        click.echo("-" * 40)
        if not rows:
            click.echo("  No expenses in window")
        for row in rows:
            click.echo(_row(row["ledger_name"][:22], row["total"]))


def register_commands(cli):
    """Register balance command with main CLI."""
    cli.add_command(balance)
