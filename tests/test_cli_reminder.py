"""Tests for reminder commands."""

from ledgerbook.cli.main import cli
from ledgerbook.domain.entities import ReminderStatus

from conftest import USER


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "--user", USER, *args])


def _create(cli_runner, temp_db, *extra):
    return _invoke(
        cli_runner, temp_db, "reminder", "create",
        "--due", "2024-04-01", "--amount", "5000", "--message", "Invoice 42",
        "--type", "receivable", *extra,
    )


def test_create_and_list(cli_runner, temp_db):
    result = _create(cli_runner, temp_db, "--channel", "sms")

    assert result.exit_code == 0
    assert "due 2024-04-01" in result.output

    listing = _invoke(cli_runner, temp_db, "reminder", "list")
    assert "Invoice 42" in listing.output
    assert "5,000.00" in listing.output
    assert "OVERDUE" in listing.output


def test_create_with_unknown_contact(cli_runner, temp_db):
    result = _create(cli_runner, temp_db, "--contact", "Nobody")

    assert result.exit_code == 1
    assert "Contact 'Nobody' not found" in result.output


def test_create_with_zero_amount(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db, "reminder", "create",
        "--due", "2024-04-01", "--amount", "0", "--message", "Nothing", "--type", "payable",
    )

    assert result.exit_code == 1
    assert "greater than zero" in result.output


def test_sent_then_complete(cli_runner, temp_db, reminder_service):
    _create(cli_runner, temp_db)
    reminder_id = reminder_service.list_reminders(USER)[0].id

    sent = _invoke(cli_runner, temp_db, "reminder", "sent", str(reminder_id), "--channel", "whatsapp")
    assert sent.exit_code == 0
    assert "marked sent via whatsapp" in sent.output

    done = _invoke(cli_runner, temp_db, "reminder", "complete", str(reminder_id))
    assert done.exit_code == 0
    assert reminder_service.get_reminder(USER, reminder_id).status == ReminderStatus.COMPLETED


def test_sent_without_channel(cli_runner, temp_db, reminder_service):
    _create(cli_runner, temp_db)
    reminder_id = reminder_service.list_reminders(USER)[0].id

    result = _invoke(cli_runner, temp_db, "reminder", "sent", str(reminder_id))

    assert result.exit_code == 1
    assert "no delivery channel" in result.output


def test_cancelled_reminder_cannot_complete(cli_runner, temp_db, reminder_service):
    _create(cli_runner, temp_db)
    reminder_id = reminder_service.list_reminders(USER)[0].id

    _invoke(cli_runner, temp_db, "reminder", "cancel", str(reminder_id))
    result = _invoke(cli_runner, temp_db, "reminder", "complete", str(reminder_id))

    assert result.exit_code == 1
    assert "cannot move from 'cancelled' to 'completed'" in result.output


def test_list_overdue_skips_completed(cli_runner, temp_db, reminder_service):
    _create(cli_runner, temp_db, "--channel", "email")
    reminder_id = reminder_service.list_reminders(USER)[0].id
    _invoke(cli_runner, temp_db, "reminder", "complete", str(reminder_id))

    result = _invoke(cli_runner, temp_db, "reminder", "list", "--overdue")

    assert "No reminders found" in result.output
