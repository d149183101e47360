"""CSV statement import domain service."""

import csv
from pathlib import Path
from typing import Any, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Direction, RawTransaction
from ledgerbook.domain.suggestion import SuggestionResolver
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount, round_to_cents, split_signed_amount
from ledgerbook.utils.date_parser import parse_date

REQUIRED_COLUMNS = {"date", "description", "amount"}

_DIRECTION_ALIASES = {
    "credit": Direction.CREDIT,
    "cr": Direction.CREDIT,
    "in": Direction.CREDIT,
    "debit": Direction.DEBIT,
    "dr": Direction.DEBIT,
    "out": Direction.DEBIT,
}


def parse_row(row: dict[str, Optional[str]]) -> RawTransaction:
    """Turn one CSV row (lower-cased headers) into a RawTransaction.

    Without a direction column the sign of the amount decides: negative
    amounts are debits.

    Raises:
        ValueError: If a field is missing or can't be parsed
    """
    values = {key: (value or "").strip() for key, value in row.items() if key}
    for column in ("date", "description", "amount"):
        if not values.get(column):
            raise ValueError(f"Missing {column}")

    amount, direction = split_signed_amount(parse_amount(values["amount"]))
    amount = round_to_cents(amount)
    if amount == 0:
        raise ValueError("Amount must be non-zero")
    if values.get("direction"):
        try:
            direction = _DIRECTION_ALIASES[values["direction"].lower()]
        except KeyError:
            raise ValueError(f"Unknown direction '{values['direction']}'")

    balance = values.get("balance") or values.get("balance_after")
    return RawTransaction(
        date=parse_date(values["date"]),
        description=values["description"],
        amount=amount,
        direction=direction,
        balance_after=parse_amount(balance) if balance else None,
    )


def read_statement(csv_file_path: str) -> tuple[list[RawTransaction], list[str]]:
    """Read a CSV statement.

    Returns:
        Parsed rows and per-row error messages

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If required columns are missing
    """
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

    rows = []
    errors = []
    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        sample = f.read(1024)
        f.seek(0)
        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
        except csv.Error:
            delimiter = ","

        reader = csv.DictReader(f, delimiter=delimiter)
        if reader.fieldnames is None:
            raise ValueError("CSV file has no columns")
        reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]

        missing = REQUIRED_COLUMNS - set(reader.fieldnames)
        if missing:
            raise ValueError(f"CSV file missing required columns: {', '.join(sorted(missing))}")

        # Start at 2 (header is row 1)
        for row_num, row in enumerate(reader, start=2):
            try:
                rows.append(parse_row(row))
            except ValueError as e:
                errors.append(f"Row {row_num}: {e}")

    return rows, errors


class StatementImportService:
    """Service for importing bank statements from CSV files."""

    def __init__(self, db: Database, resolver: Optional[SuggestionResolver] = None):
        """Initialize statement import service.

        Args:
            db: Database instance
            resolver: Suggestion resolver used on each imported row
        """
        self.db = db
        self.transaction_service = TransactionService(db, resolver)

    def import_csv(
        self,
        user_id: str,
        csv_file_path: str,
        bank_account_id: Optional[int] = None,
        suggest: bool = True,
    ) -> dict[str, Any]:
        """Import transactions from a CSV file.

        Returns:
            Dict with import statistics:
            - imported: number of transactions stored
            - suggested: number that received a suggestion
            - errors: list of error messages for skipped rows
        """
        rows, errors = read_statement(csv_file_path)
        transactions = self.transaction_service.import_transactions(
            user_id, rows, bank_account_id=bank_account_id, suggest=suggest
        )
        return {
            "imported": len(transactions),
            "suggested": sum(1 for t in transactions if t.suggested_ledger_name),
            "errors": errors,
            "transactions": transactions,
        }
