"""Pydantic models for replies from the AI suggestion collaborator."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ledgerbook.domain.entities import LedgerCategory


class LedgerSuggestionReply(BaseModel):
    """The JSON object the model is asked to answer a ledger question with."""

    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    ledger_name: str = Field(alias="ledgerName", min_length=1)
    category: LedgerCategory
    narration: Optional[str] = None
    confidence: float = 0.0

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, value):
        return LedgerCategory.parse(value or "")

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, value: float) -> float:
        return min(max(value, 0.0), 1.0)
