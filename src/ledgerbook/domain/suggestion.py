"""Suggestion resolver: pattern memory first, then the AI collaborator."""

from typing import TYPE_CHECKING, Optional, Sequence

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Suggestion, Transaction
from ledgerbook.domain.pattern_memory import PatternMemoryService
from ledgerbook.utils.log import get_logger

if TYPE_CHECKING:
    from ledgerbook.ai.base import LedgerSuggester

logger = get_logger(__name__)

BASE_CONFIDENCE = 0.5
CONFIDENCE_STEP = 0.05
MAX_CONFIDENCE = 0.99


def confidence_from_usage(usage_count: int) -> float:
    """Map a mapping's usage count to a confidence; grows with use, capped below 1."""
    return min(BASE_CONFIDENCE + CONFIDENCE_STEP * max(usage_count, 0), MAX_CONFIDENCE)


class SuggestionResolver:
    """Produce a best-effort categorization for a transaction."""

    def __init__(self, db: Database, suggester: Optional["LedgerSuggester"] = None):
        """Initialize the resolver.

        Args:
            db: Database instance
            suggester: Optional AI collaborator used when no pattern matches
        """
        self.db = db
        self.memory = PatternMemoryService(db)
        self.suggester = suggester

    def suggest(
        self,
        transaction: Transaction,
        known_ledger_names: Optional[Sequence[str]] = None,
    ) -> Optional[Suggestion]:
        """Suggest a ledger for the transaction, or None.

        Failures of the AI collaborator never propagate; storage failures do.
        """
        suggestion = self._from_pattern(transaction)
        if suggestion is not None:
            return suggestion

        if self.suggester is None:
            return None

        if known_ledger_names is None:
            known_ledger_names = [l.name for l in self.db.list_ledgers(transaction.user_id)]

        try:
            return self.suggester.suggest_ledger(
                description=transaction.description,
                amount=transaction.amount,
                direction=transaction.direction,
                known_ledger_names=list(known_ledger_names),
            )
        except Exception as exc:
            logger.warning(
                "No AI suggestion for transaction %s (%s); leaving it uncategorized",
                transaction.id,
                exc,
            )
            return None

    def _from_pattern(self, transaction: Transaction) -> Optional[Suggestion]:
        mapping = self.memory.lookup(transaction.user_id, transaction.description)
        if mapping is None:
            return None
        ledger = self.db.get_ledger(transaction.user_id, mapping.ledger_id)
        if ledger is None:
            return None
        return Suggestion(
            ledger_name=ledger.name,
            category=ledger.category,
            narration=mapping.narration or transaction.description,
            confidence=confidence_from_usage(mapping.usage_count),
            source="pattern",
        )
