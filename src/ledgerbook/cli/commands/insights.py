"""Insights command."""

import click

from ledgerbook.cli.context import get_db, get_suggester, get_user
from ledgerbook.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from ledgerbook.domain.insights import InsightsService
from ledgerbook.utils.date_parser import get_date_range


@click.command("insights")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@period_options
@click.pass_context
def insights(ctx, start_date: str | None, end_date: str | None, **period_kwargs):
    """Summarize a period in plain words (this month by default)."""
    flags = period_flags_from(period_kwargs)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=flags,
        default_range=get_date_range("this-month"),
    )
    label = next((p.replace("-", " ") for p, is_set in flags.items() if is_set), None)
    label = label or f"{start} to {end}"

    service = InsightsService(get_db(ctx), get_suggester(ctx))
    user_id = get_user(ctx)
    stats = service.period_stats(user_id, start, end, label)

    click.echo(f"\nInsights for {label}")
    click.echo("=" * 40)
    click.echo(f"  Income:  {stats.income:>14,.2f}")
    click.echo(f"  Expense: {stats.expense:>14,.2f}")
    click.echo(f"  Net:     {stats.net:>14,.2f}")
    if stats.top_expenses:
        click.echo("\n  Top expenses:")
        for name, total in stats.top_expenses:
            click.echo(f"    {name[:28]:28s} {total:>12,.2f}")
    click.echo("")
    click.echo(service.generate_insights(user_id, start, end, label))


def register_commands(cli):
    """Register insights command with main CLI."""
    cli.add_command(insights)
