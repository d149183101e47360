"""Groq-backed implementation of the AI suggestion collaborator."""

import json
import re
from collections import defaultdict
from decimal import Decimal
from typing import Sequence

from pydantic import ValidationError

from ledgerbook.ai.base import LedgerSuggester
from ledgerbook.ai.models import LedgerSuggestionReply
from ledgerbook.ai.prompts import (
    SUGGEST_SYSTEM_PROMPT,
    SUGGEST_USER_TEMPLATE,
    SUMMARY_SYSTEM_PROMPT,
    SUMMARY_USER_TEMPLATE,
)
from ledgerbook.config import Settings
from ledgerbook.domain.entities import Direction, LedgerCategory, Suggestion, Transaction
from ledgerbook.domain.errors import ExternalSuggestionUnavailable
from ledgerbook.utils.log import get_logger

logger = get_logger(__name__)

TOP_EXPENSE_COUNT = 5
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def parse_suggestion(raw_output: str) -> Suggestion:
    """Extract and validate the suggestion JSON from model output.

    Raises:
        ExternalSuggestionUnavailable: If no usable object is found
    """
    match = _JSON_OBJECT.search(raw_output or "")
    if match is None:
        raise ExternalSuggestionUnavailable("Model reply contained no JSON object")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ExternalSuggestionUnavailable(f"Model reply is not valid JSON: {exc}") from exc
    try:
        reply = LedgerSuggestionReply.model_validate(data)
    except ValidationError as exc:
        raise ExternalSuggestionUnavailable(f"Unusable model reply: {exc}") from exc

    return Suggestion(
        ledger_name=reply.ledger_name,
        category=reply.category,
        narration=reply.narration or "",
        confidence=reply.confidence,
        source="ai",
    )


class GroqSuggester(LedgerSuggester):
    """LedgerSuggester using Groq chat completions."""

    def __init__(self, llm_client: object, settings: Settings) -> None:
        """Initialize with a Groq client (or anything with the same API) and settings."""
        self.llm_client = llm_client
        self.settings = settings

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            completion = self.llm_client.chat.completions.create(
                model=self.settings.ai_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.settings.ai_temperature,
            )
            return completion.choices[0].message.content or ""
        except Exception as exc:
            logger.warning("Groq API call failed: %s", exc)
            raise ExternalSuggestionUnavailable(f"Groq API call failed: {exc}") from exc

    def suggest_ledger(
        self,
        description: str,
        amount: Decimal,
        direction: Direction,
        known_ledger_names: Sequence[str],
    ) -> Suggestion:
        prompt = SUGGEST_USER_TEMPLATE.format(
            description=description,
            amount=f"{amount:,.2f}",
            direction=direction.value,
            flow="money in" if direction is Direction.CREDIT else "money out",
            ledgers=", ".join(known_ledger_names) or "(none yet)",
            categories=", ".join(c.value for c in LedgerCategory),
        )
        raw_output = self._complete(SUGGEST_SYSTEM_PROMPT, prompt)
        logger.debug("Suggestion reply for '%s': %s", description, raw_output)
        return parse_suggestion(raw_output)

    def summarize(self, transactions: Sequence[Transaction], period_label: str) -> str:
        income = sum((t.amount for t in transactions if t.direction is Direction.CREDIT), Decimal("0"))
        expense = sum((t.amount for t in transactions if t.direction is Direction.DEBIT), Decimal("0"))

        by_description: dict[str, Decimal] = defaultdict(Decimal)
        for txn in transactions:
            if txn.direction is Direction.DEBIT:
                by_description[txn.narration or txn.description or "Other"] += txn.amount
        top = sorted(by_description.items(), key=lambda item: item[1], reverse=True)[:TOP_EXPENSE_COUNT]

        prompt = SUMMARY_USER_TEMPLATE.format(
            period=period_label,
            income=f"{income:,.2f}",
            expense=f"{expense:,.2f}",
            net=f"{income - expense:,.2f}",
            count=len(transactions),
            top_expenses="\n".join(f"- {name}: {total:,.2f}" for name, total in top) or "- none",
        )
        text = self._complete(SUMMARY_SYSTEM_PROMPT, prompt).strip()
        if not text:
            raise ExternalSuggestionUnavailable("Model returned an empty summary")
        return text
