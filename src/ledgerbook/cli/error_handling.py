"""CLI error handling helpers."""

import click

from ledgerbook.domain.errors import DomainError, StorageUnavailableError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, StorageUnavailableError):
        click.echo("The database is unavailable; nothing was saved. Try again.", err=True)
    ctx.exit(1)
