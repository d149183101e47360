"""CLI helpers for date range resolution."""

from datetime import date

import click

from ledgerbook.utils.date_parser import get_date_range, parse_date


def period_options(func):
    """Attach the shared period flags to a command."""
    for flag in ("last-week", "last-month", "last-year", "this-week", "this-month", "this-year"):
        func = click.option(f"--{flag}", is_flag=True, help=f"Limit to {flag.replace('-', ' ')}")(func)
    return func


def period_flags_from(kwargs: dict) -> dict[str, bool]:
    """Pop the period flags click passed in and key them by period name."""
    flags = {}
    for key in ("this_month", "this_year", "this_week", "last_month", "last_year", "last_week"):
        flags[key.replace("_", "-")] = bool(kwargs.pop(key, False))
    return flags


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo("Error: Only one period option can be specified at a time.", err=True)
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period_count == 1:
        period = next(p for p, is_set in period_flags.items() if is_set)
        return get_date_range(period)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is None and end is None and default_range is not None:
        start, end = default_range

    return start, end
