"""Tests for the balance and insights commands."""

from datetime import date

from ledgerbook.cli.main import cli
from ledgerbook.domain.entities import Direction
from ledgerbook.domain.insights import FALLBACK_INSIGHT

from conftest import USER, FakeSuggester

MARCH = ["--start-date", "2024-03-01", "--end-date", "2024-03-31"]


def _invoke(cli_runner, temp_db, *args, suggester=None):
    return cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--user", USER, *args],
        obj={"suggester": suggester},
    )


def _line(output, label):
    return next(line for line in output.splitlines() if line.strip().startswith(label))


def _seed(make_transaction):
    make_transaction(description="Walk-in sale", amount="1000", direction=Direction.CREDIT, ledger_name="Sales")
    make_transaction(description="Shop rent", amount="400", ledger_name="Rent")
    make_transaction(description="Old rent", amount="999", txn_date=date(2023, 1, 5), ledger_name="Rent")


def test_balance_for_window(cli_runner, temp_db, make_transaction, sample_bank_account):
    _seed(make_transaction)

    result = _invoke(cli_runner, temp_db, "balance", *MARCH)

    assert result.exit_code == 0
    assert "1,000.00" in _line(result.output, "Income")
    assert "400.00" in _line(result.output, "Expense")
    assert "600.00" in _line(result.output, "Net")
    assert "10,000.00" in _line(result.output, "Main Current")
    assert "2 confirmed transactions in window" in result.output


def test_balance_by_ledger(cli_runner, temp_db, make_transaction):
    _seed(make_transaction)

    result = _invoke(cli_runner, temp_db, "balance", *MARCH, "--by-ledger")

    assert "Expenses by ledger" in result.output
    assert "400.00" in _line(result.output.split("Expenses by ledger")[1], "Rent")


def test_balance_with_no_data(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "balance", "--by-ledger")

    assert result.exit_code == 0
    assert "0 confirmed transactions in window" in result.output
    assert "No expenses in window" in result.output


def test_balance_rejects_two_periods(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "balance", "--this-month", "--last-month")

    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_balance_rejects_period_with_dates(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "balance", "--this-month", "--start-date", "2024-03-01")

    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_insights_with_ai(cli_runner, temp_db, make_transaction):
    _seed(make_transaction)
    suggester = FakeSuggester(summary="Rent is your largest cost.")

    result = _invoke(cli_runner, temp_db, "insights", *MARCH, suggester=suggester)

    assert result.exit_code == 0
    assert "Insights for 2024-03-01 to 2024-03-31" in result.output
    assert "Shop rent" in result.output
    assert "Rent is your largest cost." in result.output
    assert suggester.calls == [(2, "2024-03-01 to 2024-03-31")]


def test_insights_without_ai(cli_runner, temp_db, make_transaction):
    _seed(make_transaction)

    result = _invoke(cli_runner, temp_db, "insights", *MARCH)

    assert result.exit_code == 0
    assert FALLBACK_INSIGHT in result.output
