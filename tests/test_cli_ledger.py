"""Tests for ledger, bank and contact commands."""

from ledgerbook.cli.main import cli

from conftest import USER


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", USER, *args], **kwargs
    )


def test_help_does_not_open_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "ledger" in result.output
    assert "reminder" in result.output


def test_init_ledgers_twice(cli_runner, temp_db):
    first = _invoke(cli_runner, temp_db, "init-ledgers")
    second = _invoke(cli_runner, temp_db, "init-ledgers")

    assert first.exit_code == 0
    assert "Created 16 system ledgers" in first.output
    assert "already installed" in second.output


def test_ledger_list_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "ledger", "list")

    assert result.exit_code == 0
    assert "No ledgers found" in result.output


def test_ledger_create_and_list(cli_runner, temp_db, ledger_service):
    result = _invoke(cli_runner, temp_db, "ledger", "create", "Fuel", "--category", "expense")
    assert result.exit_code == 0
    assert "Created ledger 'Fuel' (expense" in result.output

    listing = _invoke(cli_runner, temp_db, "ledger", "list", "--category", "expense")
    assert "Fuel" in listing.output
    assert "Groceries" in listing.output
    assert "Sales" not in listing.output


def test_ledger_create_duplicate(cli_runner, temp_db):
    _invoke(cli_runner, temp_db, "ledger", "create", "Fuel", "--category", "expense")
    result = _invoke(cli_runner, temp_db, "ledger", "create", "fuel", "--category", "expense")

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_ledger_create_rejects_unknown_category(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "ledger", "create", "Fuel", "--category", "overheads")

    assert result.exit_code == 2


def test_ledger_rename_and_delete(cli_runner, temp_db):
    _invoke(cli_runner, temp_db, "ledger", "create", "Fuel", "--category", "expense")

    renamed = _invoke(cli_runner, temp_db, "ledger", "rename", "Fuel", "Diesel")
    assert renamed.exit_code == 0

    deleted = _invoke(cli_runner, temp_db, "ledger", "delete", "Diesel", input="y\n")
    assert deleted.exit_code == 0
    assert "Deleted ledger 'Diesel'" in deleted.output


def test_ledger_rename_system_ledger_fails(cli_runner, temp_db, ledger_service):
    result = _invoke(cli_runner, temp_db, "ledger", "rename", "Rent", "Lease")

    assert result.exit_code == 1
    assert "cannot be modified" in result.output


def test_ledger_unknown(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "ledger", "delete", "Nope", "--yes")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_bank_create_list_deactivate(cli_runner, temp_db):
    created = _invoke(
        cli_runner, temp_db, "bank", "create", "Main", "--number", "50100012345678", "--balance", "2,500.00"
    )
    assert created.exit_code == 0
    assert "Created bank account 'Main'" in created.output

    listing = _invoke(cli_runner, temp_db, "bank", "list")
    assert "****5678" in listing.output
    assert "2,500.00" in listing.output

    _invoke(cli_runner, temp_db, "bank", "deactivate", "Main")
    assert "No bank accounts found" in _invoke(cli_runner, temp_db, "bank", "list").output
    assert "(inactive)" in _invoke(cli_runner, temp_db, "bank", "list", "--all").output


def test_bank_unknown_account(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "bank", "rename", "Ghost", "Other")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_contact_create_list_recompute(cli_runner, temp_db):
    created = _invoke(cli_runner, temp_db, "contact", "create", "Acme Traders", "--phone", "+15550100")
    assert created.exit_code == 0

    listing = _invoke(cli_runner, temp_db, "contact", "list")
    assert "Acme Traders" in listing.output

    recomputed = _invoke(cli_runner, temp_db, "contact", "recompute")
    assert "Recomputed totals for 1 contact" in recomputed.output
