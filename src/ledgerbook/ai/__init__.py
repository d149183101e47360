"""AI suggestion collaborator for ledgerbook."""

from typing import Optional

from ledgerbook.ai.base import LedgerSuggester
from ledgerbook.config import Settings


def create_suggester(settings: Settings) -> Optional[LedgerSuggester]:
    """Build the configured suggester, or None when no API key is set."""
    if not settings.groq_api_key:
        return None

    from groq import Groq

    from ledgerbook.ai.groq_suggester import GroqSuggester

    client = Groq(api_key=settings.groq_api_key, timeout=settings.ai_timeout_seconds)
    return GroqSuggester(client, settings)


__all__ = ["LedgerSuggester", "create_suggester"]
