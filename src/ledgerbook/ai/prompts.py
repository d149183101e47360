"""Prompt templates for the AI suggestion collaborator."""

SUGGEST_SYSTEM_PROMPT = (
    "You are an accountant who categorizes bank and cash transactions for "
    "individuals and small businesses. You answer with a single JSON object "
    "and nothing else."
)

SUGGEST_USER_TEMPLATE = """Categorize this transaction.

Description: {description}
Amount: {amount}
Direction: {direction} ({flow})

Ledgers the user already has (reuse one when it fits, otherwise propose a new descriptive name):
{ledgers}

Reply with JSON of exactly this shape:
{{"ledgerName": "...", "category": "one of {categories}", "narration": "short plain-language explanation", "confidence": 0.0}}"""

SUMMARY_SYSTEM_PROMPT = (
    "You are a friendly financial advisor. You explain figures to people "
    "without accounting training."
)

SUMMARY_USER_TEMPLATE = """Period: {period}
Total income: {income}
Total expenses: {expense}
Net cash flow: {net}
Number of transactions: {count}

Largest expenses:
{top_expenses}

Give a short assessment of financial health, the spending patterns you see, two or three concrete recommendations, and any red flags or positive highlights. Use short sections with bullet points."""
