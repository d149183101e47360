"""CSV import command."""

import click

from ledgerbook.cli.account_resolution import resolve_bank_account_or_exit
from ledgerbook.cli.context import get_db, get_suggester, get_user
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.bank_account import BankAccountService
from ledgerbook.domain.statement_import import StatementImportService
from ledgerbook.domain.suggestion import SuggestionResolver


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--bank", help="Bank account name or ID the statement belongs to (omit for cash)")
@click.option("--no-suggest", is_flag=True, help="Store the rows without suggesting ledgers")
@click.pass_context
def import_csv(ctx, csv_file: str, bank: str | None, no_suggest: bool):
    """Import transactions from a CSV file.

    The file needs date, description and amount columns. An optional
    direction column (credit/debit) overrides the sign of the amount, and an
    optional balance column is kept as the running balance.
    """
    db = get_db(ctx)
    user_id = get_user(ctx)

    bank_account_id = None
    if bank is not None:
        bank_account_id = resolve_bank_account_or_exit(ctx, BankAccountService(db), user_id, bank)

    resolver = None if no_suggest else SuggestionResolver(db, get_suggester(ctx))
    service = StatementImportService(db, resolver)

    try:
        result = service.import_csv(
            user_id, csv_file, bank_account_id=bank_account_id, suggest=not no_suggest
        )
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} transactions")
    click.echo(f"  Suggested: {result['suggested']}")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
