"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import get_date_range, parse_date
from ledgerbook.utils.amount_parser import parse_amount, round_to_cents, split_signed_amount

__all__ = ["parse_date", "get_date_range", "parse_amount", "round_to_cents", "split_signed_amount"]
