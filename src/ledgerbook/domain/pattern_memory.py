"""Pattern memory: learned description -> ledger associations."""

from datetime import datetime, UTC
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Mapping

DEFAULT_CONFIDENCE = 0.5


class PatternMemoryService:
    """Service for recording and looking up learned mappings.

    Matching is on the exact raw description string. There is no
    normalization, decay, or sharing between users, and mappings are never
    removed.
    """

    def __init__(self, db: Database):
        self.db = db

    def lookup(self, user_id: str, description: str) -> Optional[Mapping]:
        """Return the mapping learned for this exact description, if any."""
        return self.db.get_mapping(user_id, description)

    def record(
        self,
        user_id: str,
        description: str,
        ledger_id: int,
        narration: Optional[str] = None,
        confidence_hint: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> Mapping:
        """Learn from a confirmation.

        An existing mapping gets its usage count bumped by one and follows the
        latest ledger and narration; otherwise a mapping is created with a
        usage count of 1.

        Args:
            user_id: Owner of the mapping
            description: Raw transaction description (the key)
            ledger_id: Ledger the transaction was confirmed to
            narration: Narration chosen at confirmation
            confidence_hint: Confidence of the suggestion that was accepted
            now: Timestamp to record as last use

        Returns:
            The mapping after the update
        """
        now = now or datetime.now(UTC)
        mapping = self.db.get_mapping(user_id, description)
        if mapping is None:
            score = DEFAULT_CONFIDENCE if confidence_hint is None else confidence_hint
            self.db.create_mapping(
                user_id=user_id,
                description=description,
                ledger_id=ledger_id,
                narration=narration,
                confidence_score=score,
            )
        else:
            changes = {
                "usage_count": mapping.usage_count + 1,
                "last_used_at": now,
                "ledger_id": ledger_id,
            }
            if narration:
                changes["narration"] = narration
            self.db.update_mapping(user_id, mapping.id, changes)
        return self.db.get_mapping(user_id, description)

    def list_mappings(self, user_id: str) -> list[Mapping]:
        """List the user's mappings, most used first."""
        return self.db.list_mappings(user_id)
