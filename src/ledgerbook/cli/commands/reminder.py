"""Reminder commands."""

from datetime import date

import click

from ledgerbook.cli.account_resolution import resolve_contact_or_exit
from ledgerbook.cli.context import get_db, get_user
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.contact import ContactService
from ledgerbook.domain.entities import DeliveryChannel, ReminderStatus, ReminderType
from ledgerbook.domain.reminder import ReminderService, is_overdue
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date

CHANNEL_CHOICE = click.Choice([c.value for c in DeliveryChannel], case_sensitive=False)


@click.group()
def reminder_group():
    """Manage payment reminders."""
    pass


@reminder_group.command("create")
@click.option("--due", required=True, help="Due date (YYYY-MM-DD or relative like 'next week')")
@click.option("--amount", required=True, help="Amount due")
@click.option("--message", required=True, help="Reminder text")
@click.option(
    "--type",
    "reminder_type",
    required=True,
    type=click.Choice([t.value for t in ReminderType], case_sensitive=False),
)
@click.option("--channel", type=CHANNEL_CHOICE, help="Delivery channel")
@click.option("--contact", help="Contact name or ID")
@click.option("--transaction", "transaction_id", type=int, help="Related transaction ID")
@click.pass_context
def create_reminder(
    ctx,
    due: str,
    amount: str,
    message: str,
    reminder_type: str,
    channel: str | None,
    contact: str | None,
    transaction_id: int | None,
):
    """Create a reminder.

    Examples:
        ledgerbook reminder create --due "next week" --amount 5000 --message "Invoice 42" --type receivable
    """
    db = get_db(ctx)
    user_id = get_user(ctx)

    contact_id = None
    if contact is not None:
        contact_id = resolve_contact_or_exit(ctx, ContactService(db), user_id, contact)

    try:
        reminder = ReminderService(db).create_reminder(
            user_id,
            due_date=parse_date(due),
            amount=parse_amount(amount),
            message=message,
            reminder_type=reminder_type.lower(),
            channel=channel.lower() if channel else None,
            transaction_id=transaction_id,
            contact_id=contact_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created reminder {reminder.id} due {reminder.due_date}")


@reminder_group.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in ReminderStatus], case_sensitive=False),
    help="Only reminders with this status",
)
@click.option("--overdue", is_flag=True, help="Only overdue reminders")
@click.pass_context
def list_reminders(ctx, status: str | None, overdue: bool):
    """List reminders by due date."""
    service = ReminderService(get_db(ctx))
    user_id = get_user(ctx)
    today = date.today()
    if overdue:
        reminders = service.list_overdue(user_id, today)
    else:
        reminders = service.list_reminders(user_id, status=status.lower() if status else None)

    if not reminders:
        click.echo("No reminders found.")
        return

    click.echo(f"\n{'ID':>4}  {'Due':10}  {'Amount':>10}  {'Type':10}  {'Status':9}  Message")
    click.echo("-" * 80)
    for r in reminders:
        flag = " OVERDUE" if is_overdue(r, today) else ""
        click.echo(
            f"{r.id:>4}  {r.due_date.isoformat():10}  {r.amount:>10,.2f}  "
            f"{r.reminder_type.value:10}  {r.status.value:9}  {r.message}{flag}"
        )


@reminder_group.command("sent")
@click.argument("reminder_id", type=int)
@click.option("--channel", type=CHANNEL_CHOICE, help="Channel it went out on")
@click.pass_context
def mark_sent(ctx, reminder_id: int, channel: str | None):
    """Record that a reminder was sent."""
    try:
        reminder = ReminderService(get_db(ctx)).mark_sent(
            get_user(ctx), reminder_id, channel=channel.lower() if channel else None
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Reminder {reminder_id} marked sent via {reminder.channel.value}")


@reminder_group.command("complete")
@click.argument("reminder_id", type=int)
@click.pass_context
def complete(ctx, reminder_id: int):
    """Mark a reminder as settled."""
    try:
        ReminderService(get_db(ctx)).complete(get_user(ctx), reminder_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Reminder {reminder_id} completed")


@reminder_group.command("cancel")
@click.argument("reminder_id", type=int)
@click.pass_context
def cancel(ctx, reminder_id: int):
    """Cancel a reminder."""
    try:
        ReminderService(get_db(ctx)).cancel(get_user(ctx), reminder_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Reminder {reminder_id} cancelled")


def register_commands(cli):
    """Register reminder commands with main CLI."""
    cli.add_command(reminder_group, name="reminder")
