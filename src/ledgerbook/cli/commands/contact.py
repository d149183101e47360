"""Contact commands."""

import click

from ledgerbook.cli.context import get_db, get_user
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.contact import ContactService


@click.group()
def contact_group():
    """Manage customers and suppliers."""
    pass


@contact_group.command("create")
@click.argument("name")
@click.option("--phone")
@click.option("--email")
@click.pass_context
def create_contact(ctx, name: str, phone: str | None, email: str | None):
    """Create a contact."""
    service = ContactService(get_db(ctx))
    try:
        contact_id = service.create_contact(get_user(ctx), name, phone=phone, email=email)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created contact '{name.strip()}' (ID: {contact_id})")


def _print_contacts(contacts):
    click.echo("\nContacts:")
    click.echo("-" * 70)
    for c in contacts:
        click.echo(
            f"ID: {c.id:3d} | {c.name:20s} | "
            f"Receivable: {c.total_receivable:>10,.2f} | Payable: {c.total_payable:>10,.2f}"
        )


@contact_group.command("list")
@click.pass_context
def list_contacts(ctx):
    """List contacts with their running totals."""
    service = ContactService(get_db(ctx))
    contacts = service.list_contacts(get_user(ctx))
    if not contacts:
        click.echo("No contacts found.")
        return
    _print_contacts(contacts)


@contact_group.command("recompute")
@click.pass_context
def recompute_totals(ctx):
    """Rebuild contact totals from confirmed transactions."""
    service = ContactService(get_db(ctx))
    contacts = service.recompute_contact_totals(get_user(ctx))
    click.echo(f"Recomputed totals for {len(contacts)} contact{'s' if len(contacts) != 1 else ''}")
    if contacts:
        _print_contacts(contacts)


def register_commands(cli):
    """Register contact commands with main CLI."""
    cli.add_command(contact_group, name="contact")
