"""Period statistics and AI-written summaries."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.balance import category_index, in_window
from ledgerbook.domain.entities import LedgerCategory, PeriodStats
from ledgerbook.utils.log import get_logger

if TYPE_CHECKING:
    from ledgerbook.ai.base import LedgerSuggester

logger = get_logger(__name__)

FALLBACK_INSIGHT = (
    "AI insights are unavailable right now. Review your income and expense "
    "totals and categorize any pending transactions."
)

TOP_EXPENSE_COUNT = 5


class InsightsService:
    """Service producing per-period figures and a readable summary."""

    def __init__(self, db: Database, suggester: Optional["LedgerSuggester"] = None):
        self.db = db
        self.suggester = suggester

    def period_stats(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        label: str = "",
    ) -> PeriodStats:
        """Income, expense and the largest expenses of confirmed transactions in the window."""
        categories = category_index(self.db.list_ledgers(user_id))
        income = Decimal("0")
        expense = Decimal("0")
        count = 0
        by_name: dict[str, Decimal] = defaultdict(Decimal)
        for t in self.db.list_transactions(user_id, start_date=start, end_date=end, confirmed_only=True):
            if not in_window(t.date, start, end):
                continue
            count += 1
            category = categories.get(t.ledger_id)
            if category is LedgerCategory.INCOME:
                income += t.amount
            elif category is LedgerCategory.EXPENSE:
                expense += t.amount
                by_name[t.narration or t.description] += t.amount

        top = sorted(by_name.items(), key=lambda item: (-item[1], item[0]))[:TOP_EXPENSE_COUNT]
        return PeriodStats(
            label=label,
            income=income,
            expense=expense,
            transaction_count=count,
            top_expenses=tuple(top),
        )

    def generate_insights(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        label: str = "this period",
    ) -> str:
        """Ask the AI collaborator to summarize the window.

        Returns the fallback text when no collaborator is configured or it fails.
        """
        if self.suggester is None:
            return FALLBACK_INSIGHT
        transactions = self.db.list_transactions(
            user_id, start_date=start, end_date=end, confirmed_only=True
        )
        try:
            text = self.suggester.summarize(transactions, label)
        except Exception as exc:
            logger.warning("Could not generate insights for %s: %s", label, exc)
            return FALLBACK_INSIGHT
        return text.strip() or FALLBACK_INSIGHT
