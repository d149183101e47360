"""Ledger management commands."""

import click

from ledgerbook.cli.context import get_db, get_user
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.entities import LedgerCategory
from ledgerbook.domain.ledger import LedgerService

CATEGORY_CHOICE = click.Choice([c.value for c in LedgerCategory], case_sensitive=False)


def _resolve_ledger_or_exit(ctx, service: LedgerService, user_id: str, ledger: str):
    if ledger.isdigit():
        found = service.get_ledger(user_id, int(ledger))
    else:
        found = service.find_ledger_by_name(user_id, ledger)
    if found is None:
        click.echo(f"Error: Ledger '{ledger}' not found", err=True)
        ctx.exit(1)
    return found


@click.group()
def ledger_group():
    """Manage ledgers."""
    pass


@ledger_group.command("list")
@click.option("--category", type=CATEGORY_CHOICE, help="Only show one category")
@click.pass_context
def list_ledgers(ctx, category: str | None):
    """List system ledgers and your own ledgers."""
    service = LedgerService(get_db(ctx))
    ledgers = service.list_available_ledgers(get_user(ctx))
    if category:
        ledgers = [l for l in ledgers if l.category.value == category.lower()]

    if not ledgers:
        click.echo("No ledgers found. Run 'ledgerbook init-ledgers' to install the defaults.")
        return

    click.echo("\nLedgers:")
    click.echo("-" * 60)
    for l in ledgers:
        owner = "system" if l.is_system else "own"
        click.echo(f"ID: {l.id:3d} | {l.name:30s} | {l.category.value:10s} | {owner}")


@ledger_group.command("create")
@click.argument("name", metavar="LEDGER_NAME")
@click.option("--category", required=True, type=CATEGORY_CHOICE, help="Ledger category")
@click.pass_context
def create_ledger(ctx, name: str, category: str):
    """Create a ledger.

    Examples:
        ledgerbook ledger create "Fuel" --category expense
        ledgerbook ledger create "Consulting" --category income
    """
    service = LedgerService(get_db(ctx))
    try:
        created = service.create_ledger(get_user(ctx), name, category)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created ledger '{created.name}' ({created.category.value}, ID: {created.id})")


@ledger_group.command("rename")
@click.argument("ledger", metavar="LEDGER")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_ledger(ctx, ledger: str, new_name: str):
    """Rename one of your ledgers. LEDGER can be a name or ID."""
    service = LedgerService(get_db(ctx))
    user_id = get_user(ctx)
    found = _resolve_ledger_or_exit(ctx, service, user_id, ledger)
    try:
        service.rename_ledger(user_id, found.id, new_name)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Renamed ledger '{found.name}' to '{new_name}'")


@ledger_group.command("set-category")
@click.argument("ledger", metavar="LEDGER")
@click.argument("category", type=CATEGORY_CHOICE)
@click.pass_context
def set_category(ctx, ledger: str, category: str):
    """Change the category of a ledger with no confirmed transactions."""
    service = LedgerService(get_db(ctx))
    user_id = get_user(ctx)
    found = _resolve_ledger_or_exit(ctx, service, user_id, ledger)
    try:
        service.change_category(user_id, found.id, category)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Ledger '{found.name}' is now {category.lower()}")


@ledger_group.command("delete")
@click.argument("ledger", metavar="LEDGER")
@click.option("--yes", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def delete_ledger(ctx, ledger: str, yes: bool):
    """Delete one of your unused ledgers. LEDGER can be a name or ID."""
    service = LedgerService(get_db(ctx))
    user_id = get_user(ctx)
    found = _resolve_ledger_or_exit(ctx, service, user_id, ledger)

    if not yes and not click.confirm(f"Are you sure you want to delete ledger '{found.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_ledger(user_id, found.id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted ledger '{found.name}'")


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
