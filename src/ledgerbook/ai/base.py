"""AI suggestion collaborator interface."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Sequence

from ledgerbook.domain.entities import Direction, Suggestion, Transaction


class LedgerSuggester(ABC):
    """Hosted-model collaborator.

    Implementations must raise ExternalSuggestionUnavailable for every kind
    of failure (network, credentials, malformed payload).
    """

    @abstractmethod
    def suggest_ledger(
        self,
        description: str,
        amount: Decimal,
        direction: Direction,
        known_ledger_names: Sequence[str],
    ) -> Suggestion:
        """Suggest a ledger, category and narration for a transaction."""

    @abstractmethod
    def summarize(self, transactions: Sequence[Transaction], period_label: str) -> str:
        """Write a human-readable financial insight for a period."""
