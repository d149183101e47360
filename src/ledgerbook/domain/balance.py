"""Balance aggregation over confirmed transactions.

The module-level functions are pure: they take already-loaded entities and
return totals without touching storage. ``BalanceService`` only loads the
user's data and hands it to them, so calling it repeatedly on unchanged data
gives identical results.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    BalanceSummary,
    BankAccount,
    Direction,
    Ledger,
    LedgerCategory,
    Transaction,
)

ZERO = Decimal("0")


def in_window(day: date, start: Optional[date], end: Optional[date]) -> bool:
    """Return True if the day falls in the inclusive window."""
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def trailing_window(today: date, days: int) -> tuple[date, date]:
    """Window covering the last ``days`` days up to and including today."""
    return today - timedelta(days=days), today


def month_window(today: date) -> tuple[date, date]:
    """Window from the first of the month to today."""
    return today.replace(day=1), today


def category_index(ledgers: Iterable[Ledger]) -> dict[int, LedgerCategory]:
    return {ledger.id: ledger.category for ledger in ledgers}


def _confirmed(transactions: Iterable[Transaction]) -> Iterable[Transaction]:
    return (t for t in transactions if t.is_confirmed and t.ledger_id is not None)


def bank_balances(accounts: Iterable[BankAccount]) -> dict[int, Decimal]:
    """Stored balances of active accounts.

    These are the seed values recorded on the accounts; transaction history
    does not move them.
    """
    return {acc.id: acc.current_balance for acc in accounts if acc.is_active}


def cash_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of confirmed cash transactions, credits positive and debits negative."""
    return sum((t.signed_amount for t in _confirmed(transactions) if t.is_cash), ZERO)


def category_total(
    transactions: Iterable[Transaction],
    categories: dict[int, LedgerCategory],
    category: LedgerCategory,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Decimal:
    """Sum of confirmed amounts whose ledger has the given category."""
    return sum(
        (
            t.amount
            for t in _confirmed(transactions)
            if categories.get(t.ledger_id) is category and in_window(t.date, start, end)
        ),
        ZERO,
    )


def receivable_payable_totals(
    transactions: Iterable[Transaction], categories: dict[int, LedgerCategory]
) -> tuple[Decimal, Decimal]:
    """Receivables and payables as sums of confirmed tagged transactions."""
    receivables = ZERO
    payables = ZERO
    for t in _confirmed(transactions):
        category = categories.get(t.ledger_id)
        if category is LedgerCategory.RECEIVABLE:
            receivables += t.amount
        elif category is LedgerCategory.PAYABLE:
            payables += t.amount
    return receivables, payables


def contact_totals(
    transactions: Iterable[Transaction], categories: dict[int, LedgerCategory]
) -> dict[int, tuple[Decimal, Decimal]]:
    """Per-contact (receivable, payable) sums of confirmed tagged transactions."""
    totals: dict[int, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    for t in _confirmed(transactions):
        if t.contact_id is None:
            continue
        category = categories.get(t.ledger_id)
        if category is LedgerCategory.RECEIVABLE:
            totals[t.contact_id][0] += t.amount
        elif category is LedgerCategory.PAYABLE:
            totals[t.contact_id][1] += t.amount
    return {contact_id: (rec, pay) for contact_id, (rec, pay) in totals.items()}


def totals_by_ledger(
    transactions: Iterable[Transaction],
    ledgers: Sequence[Ledger],
    category: LedgerCategory,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[dict]:
    """Group confirmed amounts of one category by ledger, largest first."""
    names = {ledger.id: ledger.name for ledger in ledgers}
    categories = category_index(ledgers)
    grouped: dict[int, dict] = {}
    for t in _confirmed(transactions):
        if categories.get(t.ledger_id) is not category or not in_window(t.date, start, end):
            continue
        entry = grouped.setdefault(
            t.ledger_id, {"ledger_id": t.ledger_id, "ledger_name": names[t.ledger_id], "total": ZERO, "count": 0}
        )
        entry["total"] += t.amount
        entry["count"] += 1
    return sorted(grouped.values(), key=lambda e: (-e["total"], e["ledger_name"]))


def summarize(
    transactions: Sequence[Transaction],
    ledgers: Sequence[Ledger],
    accounts: Sequence[BankAccount],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> BalanceSummary:
    """Build a BalanceSummary from loaded data.

    Income, expense and the transaction count honour the window; balances,
    receivables and payables are all-time.
    """
    categories = category_index(ledgers)
    balances = bank_balances(accounts)
    receivables, payables = receivable_payable_totals(transactions, categories)
    return BalanceSummary(
        bank_total=sum(balances.values(), ZERO),
        bank_balances=balances,
        cash_balance=cash_balance(transactions),
        income=category_total(transactions, categories, LedgerCategory.INCOME, start, end),
        expense=category_total(transactions, categories, LedgerCategory.EXPENSE, start, end),
        receivables=receivables,
        payables=payables,
        transaction_count=sum(1 for t in _confirmed(transactions) if in_window(t.date, start, end)),
        start_date=start,
        end_date=end,
    )


class BalanceService:
    """Read-only service deriving balances for one user."""

    def __init__(self, db: Database):
        self.db = db

    def _confirmed_transactions(self, user_id: str) -> list[Transaction]:
        return self.db.list_transactions(user_id, confirmed_only=True)

    def summary(
        self, user_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> BalanceSummary:
        """Summary for an optional inclusive date window."""
        return summarize(
            self._confirmed_transactions(user_id),
            self.db.list_ledgers(user_id),
            self.db.list_bank_accounts(user_id),
            start,
            end,
        )

    def dashboard(self, user_id: str, today: Optional[date] = None, days: int = 30) -> BalanceSummary:
        """Summary over the trailing ``days`` days."""
        start, end = trailing_window(today or date.today(), days)
        return self.summary(user_id, start, end)

    def cash_balance(self, user_id: str) -> Decimal:
        return cash_balance(self.db.list_transactions(user_id, cash_only=True, confirmed_only=True))

    def bank_total(self, user_id: str) -> Decimal:
        return sum(bank_balances(self.db.list_bank_accounts(user_id)).values(), ZERO)

    def income_total(
        self, user_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> Decimal:
        categories = category_index(self.db.list_ledgers(user_id))
        return category_total(self._confirmed_transactions(user_id), categories, LedgerCategory.INCOME, start, end)

    def expense_total(
        self, user_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> Decimal:
        categories = category_index(self.db.list_ledgers(user_id))
        return category_total(self._confirmed_transactions(user_id), categories, LedgerCategory.EXPENSE, start, end)

    def expense_by_category(
        self, user_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[dict]:
        """Expense totals per ledger for reports."""
        return totals_by_ledger(
            self._confirmed_transactions(user_id),
            self.db.list_ledgers(user_id),
            LedgerCategory.EXPENSE,
            start,
            end,
        )
