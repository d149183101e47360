"""Domain layer for ledgerbook application."""

# Services are imported lazily so that ``ledgerbook.database`` can import
# ``ledgerbook.domain.entities`` without pulling the services in.
_SERVICES = {
    "LedgerService": "ledgerbook.domain.ledger",
    "PatternMemoryService": "ledgerbook.domain.pattern_memory",
    "SuggestionResolver": "ledgerbook.domain.suggestion",
    "TransactionService": "ledgerbook.domain.transaction",
    "ReminderService": "ledgerbook.domain.reminder",
    "BalanceService": "ledgerbook.domain.balance",
    "ContactService": "ledgerbook.domain.contact",
    "BankAccountService": "ledgerbook.domain.bank_account",
    "InsightsService": "ledgerbook.domain.insights",
    "StatementImportService": "ledgerbook.domain.statement_import",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
