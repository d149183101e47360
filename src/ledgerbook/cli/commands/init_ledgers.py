"""Install the shared system ledgers."""

import click

from ledgerbook.cli.context import get_db
from ledgerbook.domain.ledger import LedgerService


@click.command("init-ledgers")
@click.pass_context
def init_ledgers(ctx):
    """Install the default system ledgers.

    Ledgers that already exist are left alone, so running this twice is safe.
    """
    service = LedgerService(get_db(ctx))
    created = service.seed_system_ledgers()
    if created:
        click.echo(f"Created {created} system ledger{'s' if created != 1 else ''}")
    else:
        click.echo("System ledgers already installed")


def register_commands(cli):
    """Register init-ledgers command with main CLI."""
    cli.add_command(init_ledgers)
