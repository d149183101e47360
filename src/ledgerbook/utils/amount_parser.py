"""Amount parsing utilities."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ledgerbook.domain.entities import Direction

# Amounts are stored with two decimal places
CENTS = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45" or "₹1,234.56"
    - "-123.45"
    - "(123.45)" (negative in parentheses)

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    text = str(amount_str).strip()
    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"[$€£¥₹,\s]", "", text)

    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def split_signed_amount(amount: Decimal) -> tuple[Decimal, Direction]:
    """Turn a signed amount into a positive magnitude and a direction.

    Negative amounts are debits; zero and positive amounts are credits.
    """
    if amount < 0:
        return -amount, Direction.DEBIT
    return amount, Direction.CREDIT


def round_to_cents(amount: Decimal) -> Decimal:
    """Round a finite amount to the two decimal places the store keeps."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
