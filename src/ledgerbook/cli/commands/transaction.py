"""Transaction management commands."""

import click

from ledgerbook.cli.account_resolution import resolve_bank_account_or_exit, resolve_contact_or_exit
from ledgerbook.cli.context import get_db, get_suggester, get_user
from ledgerbook.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.bank_account import BankAccountService
from ledgerbook.domain.contact import ContactService
from ledgerbook.domain.entities import Direction, LedgerCategory, TransactionState
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.pattern_memory import PatternMemoryService
from ledgerbook.domain.suggestion import SuggestionResolver, confidence_from_usage
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date

CATEGORY_CHOICE = click.Choice([c.value for c in LedgerCategory], case_sensitive=False)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--ledger", help="Ledger name")
@click.option("--bank", help="Bank account name or ID")
@click.option("--cash", is_flag=True, help="Only cash transactions")
@click.option(
    "--state",
    type=click.Choice([s.value for s in TransactionState], case_sensitive=False),
    help="Only transactions in this state",
)
@click.option("--limit", type=int, help="Show at most this many transactions")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    ledger: str | None,
    bank: str | None,
    cash: bool,
    state: str | None,
    limit: int | None,
    **period_kwargs,
):
    """List transactions, newest first.

    Examples:
        ledgerbook transaction list --this-month
        ledgerbook transaction list --state imported
        ledgerbook transaction list --ledger Rent --start-date "last year"
    """
    db = get_db(ctx)
    user_id = get_user(ctx)
    ledger_service = LedgerService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(period_kwargs),
    )

    ledger_id = None
    if ledger is not None:
        found = ledger_service.find_ledger_by_name(user_id, ledger)
        if found is None:
            click.echo(f"Error: Ledger '{ledger}' not found", err=True)
            ctx.exit(1)
        ledger_id = found.id

    bank_account_id = None
    if bank is not None:
        bank_account_id = resolve_bank_account_or_exit(ctx, BankAccountService(db), user_id, bank)

    transactions = TransactionService(db).list_transactions(
        user_id,
        start_date=start,
        end_date=end,
        ledger_id=ledger_id,
        bank_account_id=bank_account_id,
        cash_only=cash,
        state=TransactionState(state.lower()) if state else None,
        limit=limit,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    names = {l.id: l.name for l in ledger_service.list_available_ledgers(user_id)}
    click.echo(f"\n{'ID':>5}  {'Date':10}  {'Amount':>12}  {'State':9}  {'Ledger':20}  Description")
    click.echo("-" * 90)
    for t in transactions:
        if t.ledger_id is not None:
            ledger_name = names.get(t.ledger_id, "?")
        elif t.suggested_ledger_name:
            ledger_name = f"{t.suggested_ledger_name}?"
        else:
            ledger_name = "-"
        click.echo(
            f"{t.id:>5}  {t.date.isoformat():10}  {t.signed_amount:>12,.2f}  "
            f"{t.state.value:9}  {ledger_name[:20]:20}  {t.description}"
        )


@transaction_group.command("suggest")
@click.argument("transaction_ids", type=int, nargs=-1, required=False)
@click.option("--all", "all_imported", is_flag=True, help="Suggest for every imported transaction")
@click.pass_context
def suggest(ctx, transaction_ids: tuple[int, ...], all_imported: bool):
    """Suggest ledgers from learned patterns or the AI assistant."""
    db = get_db(ctx)
    user_id = get_user(ctx)
    service = TransactionService(db, SuggestionResolver(db, get_suggester(ctx)))

    if all_imported:
        transaction_ids = tuple(
            t.id for t in service.list_transactions(user_id, state=TransactionState.IMPORTED)
        )
    if not transaction_ids:
        click.echo("Nothing to suggest.")
        return

    for transaction_id in transaction_ids:
        try:
            suggestion = service.suggest_for_transaction(user_id, transaction_id)
        except ValueError as e:
            handle_domain_error(ctx, e)
            return
        if suggestion is None:
            click.echo(f"Transaction {transaction_id}: no suggestion, categorize it manually")
        else:
            click.echo(
                f"Transaction {transaction_id}: {suggestion.ledger_name} "
                f"({suggestion.category.value}, {suggestion.confidence:.0%} from {suggestion.source})"
            )


@transaction_group.command("confirm")
@click.argument("transaction_id", type=int)
@click.option("--ledger", help="Ledger name (defaults to the suggestion)")
@click.option("--category", type=CATEGORY_CHOICE, help="Category if the ledger is new")
@click.option("--narration", help="Narration")
@click.option("--contact", help="Contact name or ID for receivables and payables")
@click.pass_context
def confirm(
    ctx,
    transaction_id: int,
    ledger: str | None,
    category: str | None,
    narration: str | None,
    contact: str | None,
):
    """Confirm a transaction to a ledger.

    Examples:
        ledgerbook transaction confirm 12
        ledgerbook transaction confirm 12 --ledger "Fuel" --category expense
    """
    db = get_db(ctx)
    user_id = get_user(ctx)

    contact_id = None
    if contact is not None:
        contact_id = resolve_contact_or_exit(ctx, ContactService(db), user_id, contact)

    try:
        transaction = TransactionService(db).confirm_transaction(
            user_id,
            transaction_id,
            ledger_name=ledger,
            narration=narration,
            category=category,
            contact_id=contact_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    ledger_obj = LedgerService(db).get_ledger(user_id, transaction.ledger_id)
    click.echo(f"Confirmed transaction {transaction_id} to '{ledger_obj.name}'")


@transaction_group.command("edit")
@click.argument("transaction_id", type=int)
@click.option("--ledger", help="New ledger name")
@click.option("--category", type=CATEGORY_CHOICE, help="Category if the ledger is new")
@click.option("--narration", help="New narration")
@click.option("--date", help="New date (only before confirmation)")
@click.option("--amount", help="New amount (only before confirmation)")
@click.option(
    "--direction",
    type=click.Choice([d.value for d in Direction], case_sensitive=False),
    help="New direction (only before confirmation)",
)
@click.option("--description", help="New description (only before confirmation)")
@click.pass_context
def edit(
    ctx,
    transaction_id: int,
    ledger: str | None,
    category: str | None,
    narration: str | None,
    date: str | None,
    amount: str | None,
    direction: str | None,
    description: str | None,
):
    """Edit a transaction.

    Confirmed transactions only accept --ledger and --narration.
    """
    db = get_db(ctx)
    user_id = get_user(ctx)
    service = TransactionService(db)

    changes = {"narration": narration, "description": description}
    if direction is not None:
        changes["direction"] = direction.lower()
    if date is not None:
        try:
            changes["date"] = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)
    if amount is not None:
        try:
            changes["amount"] = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        transaction = service.require_transaction(user_id, transaction_id)
        if transaction.is_confirmed:
            service.update_transaction(
                user_id, transaction_id, ledger_name=ledger, category=category, **changes
            )
        else:
            if ledger is not None:
                click.echo("Error: Use 'transaction confirm' to assign a ledger", err=True)
                ctx.exit(1)
            service.update_transaction(user_id, transaction_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def delete(ctx, transaction_id: int, yes: bool):
    """Delete a transaction."""
    service = TransactionService(get_db(ctx))
    user_id = get_user(ctx)
    try:
        transaction = service.require_transaction(user_id, transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if not yes and not click.confirm(
        f"Delete transaction {transaction_id} ({transaction.date}, {transaction.description})?"
    ):
        click.echo("Deletion cancelled.")
        return

    service.delete_transaction(user_id, transaction_id)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("patterns")
@click.pass_context
def patterns(ctx):
    """Show learned description to ledger patterns."""
    db = get_db(ctx)
    user_id = get_user(ctx)
    mappings = PatternMemoryService(db).list_mappings(user_id)
    if not mappings:
        click.echo("No learned patterns yet.")
        return

    names = {l.id: l.name for l in LedgerService(db).list_available_ledgers(user_id)}
    click.echo(f"\n{'Uses':>5}  {'Conf':>5}  {'Ledger':20}  Description")
    click.echo("-" * 70)
    for m in mappings:
        click.echo(
            f"{m.usage_count:>5}  {confidence_from_usage(m.usage_count):>5.0%}  "
            f"{names.get(m.ledger_id, '?')[:20]:20}  {m.description}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
