"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_LAST_N_DAYS = re.compile(r"^last[ -](\d+)[ -]days?$")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this week",
      "last friday", "30 days ago"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    ago = re.match(r"^(\d+) days? ago$", text)
    if ago:
        return today - timedelta(days=int(ago.group(1)))

    word, _, period = text.partition(" ")
    if word == "last":
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        if period == "week":
            return today - timedelta(days=today.weekday() + 7)
        if period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)
    elif word == "this":
        if period == "month":
            return today.replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1)
        if period == "week":
            return today - timedelta(days=today.weekday())
    elif word == "next":
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        if period == "week":
            return today + timedelta(days=7 - today.weekday())

    try:
        return date_parser.parse(date_str.strip()).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: this-month, this-year, this-week, last-month, last-year,
            last-week, or last-N-days
        today: Reference date (defaults to today)

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    trailing = _LAST_N_DAYS.match(period)
    if trailing:
        return (today - timedelta(days=int(trailing.group(1))), today)

    if period == "this-month":
        return (today.replace(day=1), today)
    if period == "this-year":
        return (today.replace(month=1, day=1), today)
    if period == "this-week":
        return (today - timedelta(days=today.weekday()), today)
    if period == "last-month":
        first_of_month = today.replace(day=1)
        return (first_of_month - relativedelta(months=1), first_of_month - timedelta(days=1))
    if period == "last-year":
        first_of_year = today.replace(month=1, day=1)
        return (first_of_year - relativedelta(years=1), first_of_year - timedelta(days=1))
    if period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-year, "
        "this-week, last-month, last-year, last-week, last-N-days"
    )
