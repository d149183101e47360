"""Tests for period statistics and AI insights."""

from datetime import date
from decimal import Decimal

from ledgerbook.domain.entities import Direction
from ledgerbook.domain.insights import FALLBACK_INSIGHT, InsightsService

from conftest import USER, FailingSuggester, FakeSuggester


def _seed(make_transaction):
    make_transaction(description="Sale", amount="1000", direction=Direction.CREDIT, ledger_name="Sales")
    make_transaction(description="Rent", amount="400", ledger_name="Rent")
    make_transaction(description="UPI/BIGBASKET", amount="150", ledger_name="Groceries")
    make_transaction(description="UPI/BIGBASKET", amount="50", ledger_name="Groceries")
    make_transaction(description="Unconfirmed", amount="999")
    make_transaction(description="Last year", amount="77", ledger_name="Rent", txn_date=date(2023, 3, 10))


def test_period_stats(temp_db, make_transaction):
    _seed(make_transaction)

    stats = InsightsService(temp_db).period_stats(USER, date(2024, 3, 1), date(2024, 3, 31), "March")

    assert stats.label == "March"
    assert stats.income == Decimal("1000")
    assert stats.expense == Decimal("600")
    assert stats.net == Decimal("400")
    assert stats.transaction_count == 4
    assert stats.top_expenses == (("Rent", Decimal("400")), ("UPI/BIGBASKET", Decimal("200")))


def test_generate_insights_uses_suggester(temp_db, make_transaction):
    _seed(make_transaction)
    suggester = FakeSuggester(summary="  Rent is your largest cost.  ")

    text = InsightsService(temp_db, suggester).generate_insights(
        USER, date(2024, 3, 1), date(2024, 3, 31), "March"
    )

    assert text == "Rent is your largest cost."
    assert suggester.calls == [(4, "March")]


def test_generate_insights_without_suggester_falls_back(temp_db):
    assert InsightsService(temp_db).generate_insights(USER) == FALLBACK_INSIGHT


def test_generate_insights_failure_falls_back(temp_db):
    assert InsightsService(temp_db, FailingSuggester()).generate_insights(USER) == FALLBACK_INSIGHT


def test_generate_insights_empty_reply_falls_back(temp_db):
    assert InsightsService(temp_db, FakeSuggester(summary="")).generate_insights(USER) == FALLBACK_INSIGHT
