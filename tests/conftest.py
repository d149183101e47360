"""Shared pytest fixtures for ledgerbook tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from ledgerbook.ai.base import LedgerSuggester
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.bank_account import BankAccountService
from ledgerbook.domain.contact import ContactService
from ledgerbook.domain.entities import Direction, LedgerCategory, Suggestion
from ledgerbook.domain.errors import ExternalSuggestionUnavailable
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.pattern_memory import PatternMemoryService
from ledgerbook.domain.reminder import ReminderService
from ledgerbook.domain.suggestion import SuggestionResolver
from ledgerbook.domain.transaction import TransactionService

USER = "user-1"
OTHER_USER = "user-2"


class FakeSuggester(LedgerSuggester):
    """Suggester returning canned answers and recording its calls."""

    def __init__(self, suggestion=None, summary="Spending looks steady."):
        self.suggestion = suggestion or Suggestion(
            ledger_name="Fuel",
            category=LedgerCategory.EXPENSE,
            narration="Fuel for delivery van",
            confidence=0.8,
            source="ai",
        )
        self.summary = summary
        self.calls = []

    def suggest_ledger(self, description, amount, direction, known_ledger_names):
        self.calls.append((description, amount, direction, list(known_ledger_names)))
        return self.suggestion

    def summarize(self, transactions, period_label):
        self.calls.append((len(transactions), period_label))
        return self.summary


class FailingSuggester(LedgerSuggester):
    """Suggester whose every call fails like an unreachable model."""

    def suggest_ledger(self, description, amount, direction, known_ledger_names):
        raise ExternalSuggestionUnavailable("model unreachable")

    def summarize(self, transactions, period_label):
        raise ExternalSuggestionUnavailable("model unreachable")


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    return USER


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with system ledgers installed."""
    service = LedgerService(temp_db)
    service.seed_system_ledgers()
    return service


@pytest.fixture
def memory_service(temp_db):
    return PatternMemoryService(temp_db)


@pytest.fixture
def contact_service(temp_db):
    return ContactService(temp_db)


@pytest.fixture
def bank_account_service(temp_db):
    return BankAccountService(temp_db)


@pytest.fixture
def reminder_service(temp_db):
    return ReminderService(temp_db)


@pytest.fixture
def fake_suggester():
    return FakeSuggester()


@pytest.fixture
def transaction_service(temp_db, ledger_service):
    """TransactionService using pattern memory only."""
    return TransactionService(temp_db)


@pytest.fixture
def ai_transaction_service(temp_db, ledger_service, fake_suggester):
    """TransactionService whose resolver falls back to the fake AI suggester."""
    return TransactionService(temp_db, SuggestionResolver(temp_db, fake_suggester))


@pytest.fixture
def sample_bank_account(bank_account_service):
    """Create a sample bank account with a stored balance."""
    account_id = bank_account_service.create_account(
        USER, "Main Current", account_number="50100012345678", opening_balance=Decimal("10000.00")
    )
    return bank_account_service.get_account(USER, account_id)


@pytest.fixture
def sample_contact(contact_service):
    contact_id = contact_service.create_contact(USER, "Acme Traders", phone="+15550100")
    return contact_service.get_contact(USER, contact_id)


@pytest.fixture
def make_transaction(transaction_service):
    """Factory creating an imported cash transaction with sensible defaults."""

    def _make(
        description="UPI/SWIGGY/ORDER",
        amount="250.00",
        direction=Direction.DEBIT,
        txn_date=date(2024, 3, 10),
        **kwargs,
    ):
        return transaction_service.create_transaction(
            user_id=kwargs.pop("user_id", USER),
            date=txn_date,
            description=description,
            amount=Decimal(amount),
            direction=direction,
            **kwargs,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
