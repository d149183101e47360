"""Main CLI entry point."""

import click

from ledgerbook.config import get_settings
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.utils.log import set_level

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    add,
    balance,
    bank,
    contact,
    import_cmd,
    init_ledgers,
    insights,
    ledger,
    reminder,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option(
    "--user",
    help="User whose books to work on (overrides LEDGERBOOK_USER)",
    envvar="LEDGERBOOK_USER",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None, verbose: bool):
    """Ledgerbook - bookkeeping for small businesses.

    Import bank transactions, let learned patterns and an AI assistant
    suggest ledgers, confirm them, and keep track of receivables, payables
    and reminders.
    """
    ctx.ensure_object(dict)
    settings = get_settings()
    set_level("DEBUG" if verbose else settings.log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path or settings.db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["settings"] = settings
        ctx.obj["user_id"] = user or settings.user
        ctx.call_on_close(db.disconnect)


# Register all commands
init_ledgers.register_commands(cli)
ledger.register_commands(cli)
bank.register_commands(cli)
contact.register_commands(cli)
add.register_commands(cli)
import_cmd.register_commands(cli)
transaction.register_commands(cli)
reminder.register_commands(cli)
balance.register_commands(cli)
insights.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
