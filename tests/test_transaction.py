"""Tests for the transaction lifecycle."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.domain.entities import (
    Direction,
    LedgerCategory,
    RawTransaction,
    TransactionState,
)
from ledgerbook.domain.errors import (
    ImmutableFieldError,
    InvalidTransitionError,
    MissingLedgerError,
    NotFoundError,
    ValidationError,
)
from ledgerbook.domain.suggestion import SuggestionResolver
from ledgerbook.domain.transaction import TransactionService

from conftest import OTHER_USER, USER, FailingSuggester


def test_create_transaction_starts_imported(make_transaction):
    txn = make_transaction()

    assert txn.state is TransactionState.IMPORTED
    assert txn.is_confirmed is False
    assert txn.is_reconciled is False
    assert txn.ledger_id is None
    assert txn.is_cash is True
    assert txn.amount == Decimal("250.00")


@pytest.mark.parametrize("amount", ["0", "-10"])
def test_create_transaction_requires_positive_amount(make_transaction, amount):
    with pytest.raises(ValidationError, match="greater than zero"):
        make_transaction(amount=amount)


def test_create_transaction_requires_description(make_transaction):
    with pytest.raises(ValidationError, match="Description"):
        make_transaction(description="  ")


def test_create_transaction_rejects_unknown_bank_account(make_transaction):
    with pytest.raises(NotFoundError):
        make_transaction(bank_account_id=999)


def test_create_transaction_with_ledger_confirms_immediately(make_transaction, temp_db):
    txn = make_transaction(description="Cash sale", direction=Direction.CREDIT, ledger_name="Sales")

    assert txn.is_confirmed is True
    assert txn.state is TransactionState.CONFIRMED
    assert temp_db.get_ledger(USER, txn.ledger_id).name == "Sales"


def test_create_with_unusable_ledger_stores_nothing(transaction_service, make_transaction):
    with pytest.raises(ValidationError, match="Category is required"):
        make_transaction(description="Tea stall", amount="50", ledger_name="Snacks")

    assert transaction_service.list_transactions(USER) == []


@pytest.mark.parametrize("amount", ["0.004", "0.001"])
def test_create_transaction_rejects_sub_cent_amount(make_transaction, amount):
    with pytest.raises(ValidationError, match="greater than zero"):
        make_transaction(amount=amount, ledger_name="Rent")


def test_create_transaction_rounds_to_cents(make_transaction):
    txn = make_transaction(amount="10.005")

    assert txn.amount == Decimal("10.01")


def test_confirm_with_new_ledger_creates_one_ledger_and_one_mapping(
    temp_db, transaction_service, make_transaction
):
    before = len(temp_db.list_ledgers(USER))
    txn = make_transaction(description="POS SHELL FUEL")

    confirmed = transaction_service.confirm_transaction(
        USER, txn.id, ledger_name="Fuel", category=LedgerCategory.EXPENSE
    )

    assert len(temp_db.list_ledgers(USER)) == before + 1
    mappings = temp_db.list_mappings(USER)
    assert len(mappings) == 1
    assert mappings[0].usage_count == 1
    assert mappings[0].description == "POS SHELL FUEL"
    assert mappings[0].ledger_id == confirmed.ledger_id


def test_confirm_sets_flags_and_state(transaction_service, make_transaction):
    txn = make_transaction()

    confirmed = transaction_service.confirm_transaction(USER, txn.id, ledger_name="Groceries")

    assert confirmed.is_confirmed is True
    assert confirmed.is_reconciled is True
    assert confirmed.state is TransactionState.CONFIRMED
    assert confirmed.ledger_id is not None
    assert confirmed.amount > 0


def test_confirm_matching_description_increments_existing_mapping(
    temp_db, transaction_service, make_transaction
):
    first = make_transaction(description="UPI/BIGBASKET")
    transaction_service.confirm_transaction(USER, first.id, ledger_name="Groceries")
    second = make_transaction(description="UPI/BIGBASKET", txn_date=date(2024, 3, 17))

    transaction_service.confirm_transaction(USER, second.id, ledger_name="Groceries")

    mappings = temp_db.list_mappings(USER)
    assert len(mappings) == 1
    assert mappings[0].usage_count == 2


def test_mapping_key_is_raw_description_not_narration(temp_db, transaction_service, make_transaction):
    txn = make_transaction(description="UPI/SWIGGY/ORDER")

    transaction_service.confirm_transaction(
        USER, txn.id, ledger_name="Groceries", narration="Team lunch"
    )

    mapping = temp_db.get_mapping(USER, "UPI/SWIGGY/ORDER")
    assert mapping is not None
    assert mapping.narration == "Team lunch"
    assert temp_db.get_mapping(USER, "Team lunch") is None


def test_confirm_without_ledger_raises_missing_ledger(transaction_service, make_transaction):
    txn = make_transaction()

    with pytest.raises(MissingLedgerError):
        transaction_service.confirm_transaction(USER, txn.id)


def test_confirm_new_ledger_without_category_fails_and_leaves_transaction(
    transaction_service, make_transaction
):
    txn = make_transaction()

    with pytest.raises(ValidationError):
        transaction_service.confirm_transaction(USER, txn.id, ledger_name="Something New")

    assert transaction_service.get_transaction(USER, txn.id).is_confirmed is False


def test_confirm_twice_is_rejected(transaction_service, make_transaction):
    txn = make_transaction()
    transaction_service.confirm_transaction(USER, txn.id, ledger_name="Groceries")

    with pytest.raises(InvalidTransitionError):
        transaction_service.confirm_transaction(USER, txn.id, ledger_name="Rent")


def test_suggest_then_accept(ai_transaction_service, fake_suggester, make_transaction, temp_db):
    txn = make_transaction(description="POS SHELL FUEL")

    suggestion = ai_transaction_service.suggest_for_transaction(USER, txn.id)
    suggested = ai_transaction_service.get_transaction(USER, txn.id)

    assert suggestion.ledger_name == "Fuel"
    assert suggested.state is TransactionState.SUGGESTED
    assert suggested.suggested_ledger_name == "Fuel"
    assert suggested.suggested_category is LedgerCategory.EXPENSE
    assert suggested.ai_suggested is True
    assert suggested.suggestion_confidence == pytest.approx(0.8)
    assert suggested.ledger_id is None

    confirmed = ai_transaction_service.confirm_transaction(USER, txn.id)

    assert temp_db.get_ledger(USER, confirmed.ledger_id).name == "Fuel"
    assert confirmed.narration == "Fuel for delivery van"
    assert temp_db.get_mapping(USER, "POS SHELL FUEL").confidence_score == pytest.approx(0.8)


def test_suggest_without_match_keeps_imported(transaction_service, make_transaction):
    txn = make_transaction()

    assert transaction_service.suggest_for_transaction(USER, txn.id) is None
    assert transaction_service.get_transaction(USER, txn.id).state is TransactionState.IMPORTED


def test_failed_ai_still_allows_manual_confirmation(temp_db, ledger_service, make_transaction):
    service = TransactionService(temp_db, SuggestionResolver(temp_db, FailingSuggester()))
    txn = make_transaction(description="MYSTERY PAYEE")

    assert service.suggest_for_transaction(USER, txn.id) is None
    confirmed = service.confirm_transaction(
        USER, txn.id, ledger_name="Miscellaneous Expense"
    )

    assert confirmed.is_confirmed is True


def test_suggest_on_confirmed_transaction_rejected(transaction_service, make_transaction):
    txn = make_transaction()
    transaction_service.confirm_transaction(USER, txn.id, ledger_name="Groceries")

    with pytest.raises(InvalidTransitionError):
        transaction_service.suggest_for_transaction(USER, txn.id)


def test_confirm_receivable_increments_contact_total(
    transaction_service, make_transaction, contact_service, sample_contact
):
    txn = make_transaction(description="Invoice 42", amount="5000", direction=Direction.CREDIT)

    transaction_service.confirm_transaction(
        USER, txn.id, ledger_name="Accounts Receivable", contact_id=sample_contact.id
    )

    contact = contact_service.get_contact(USER, sample_contact.id)
    assert contact.total_receivable == Decimal("5000")
    assert contact.total_payable == Decimal("0")


def test_confirm_payable_uses_contact_stored_on_transaction(
    transaction_service, make_transaction, contact_service, sample_contact
):
    txn = make_transaction(description="Supplier bill", amount="700", contact_id=sample_contact.id)

    transaction_service.confirm_transaction(USER, txn.id, ledger_name="Accounts Payable")

    assert contact_service.get_contact(USER, sample_contact.id).total_payable == Decimal("700")


def test_confirm_expense_does_not_touch_contact(
    transaction_service, make_transaction, contact_service, sample_contact
):
    txn = make_transaction(contact_id=sample_contact.id)

    transaction_service.confirm_transaction(USER, txn.id, ledger_name="Groceries")

    contact = contact_service.get_contact(USER, sample_contact.id)
    assert contact.total_receivable == Decimal("0")
    assert contact.total_payable == Decimal("0")


def test_confirm_rolls_back_when_a_step_fails(temp_db, transaction_service, make_transaction, monkeypatch):
    txn = make_transaction(description="UPI/BIGBASKET")

    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(transaction_service.memory, "record", boom)

    with pytest.raises(RuntimeError):
        transaction_service.confirm_transaction(USER, txn.id, ledger_name="Groceries")

    reloaded = transaction_service.get_transaction(USER, txn.id)
    assert reloaded.is_confirmed is False
    assert reloaded.ledger_id is None


def test_failed_confirm_does_not_keep_new_ledger(temp_db, transaction_service, make_transaction, monkeypatch):
    txn = make_transaction(description="POS SHELL FUEL")

    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(transaction_service.memory, "record", boom)

    with pytest.raises(RuntimeError):
        transaction_service.confirm_transaction(
            USER, txn.id, ledger_name="Fuel", category=LedgerCategory.EXPENSE
        )

    assert temp_db.find_ledger_by_name(USER, "Fuel") is None
    assert transaction_service.get_transaction(USER, txn.id).is_confirmed is False


def test_confirm_reuses_ledger_created_concurrently(temp_db, transaction_service, make_transaction, monkeypatch):
    txn = make_transaction(description="POS SHELL FUEL")
    winner_id = temp_db.create_ledger(USER, "Fuel", LedgerCategory.EXPENSE)
    real_find = temp_db.find_ledger_by_name
    calls = []

    def find_missing_first(user_id, name):
        # Both pre-insert checks run before the other writer committed
        calls.append(name)
        return None if len(calls) <= 2 else real_find(user_id, name)

    monkeypatch.setattr(temp_db, "find_ledger_by_name", find_missing_first)

    confirmed = transaction_service.confirm_transaction(
        USER, txn.id, ledger_name="Fuel", category=LedgerCategory.EXPENSE
    )

    assert confirmed.ledger_id == winner_id
    assert temp_db.get_mapping(USER, "POS SHELL FUEL").ledger_id == winner_id


def test_confirm_inherits_suggested_category_ignoring_case(ai_transaction_service, make_transaction, temp_db):
    txn = make_transaction(description="POS SHELL FUEL")
    ai_transaction_service.suggest_for_transaction(USER, txn.id)

    confirmed = ai_transaction_service.confirm_transaction(USER, txn.id, ledger_name="fuel")

    assert temp_db.get_ledger(USER, confirmed.ledger_id).category is LedgerCategory.EXPENSE


def test_edit_confirmed_changes_ledger_and_narration_only(temp_db, transaction_service, make_transaction):
    txn = make_transaction(description="UPI/BIGBASKET")
    transaction_service.confirm_transaction(USER, txn.id, ledger_name="Groceries")

    edited = transaction_service.edit_confirmed(
        USER, txn.id, ledger_name="Office Supplies", narration="Printer paper"
    )

    assert temp_db.get_ledger(USER, edited.ledger_id).name == "Office Supplies"
    assert edited.narration == "Printer paper"
    assert edited.is_confirmed is True
    # Pattern memory still points at the ledger chosen on confirmation
    mapping = temp_db.get_mapping(USER, "UPI/BIGBASKET")
    assert temp_db.get_ledger(USER, mapping.ledger_id).name == "Groceries"
    assert mapping.usage_count == 1


def test_edit_confirmed_requires_confirmation(transaction_service, make_transaction):
    txn = make_transaction()

    with pytest.raises(InvalidTransitionError):
        transaction_service.edit_confirmed(USER, txn.id, narration="x")


@pytest.mark.parametrize(
    "changes",
    [{"amount": Decimal("1")}, {"date": date(2024, 1, 1)}, {"direction": "credit"}, {"description": "x"}],
)
def test_update_confirmed_locked_fields_raise(transaction_service, make_transaction, changes):
    txn = make_transaction()
    transaction_service.confirm_transaction(USER, txn.id, ledger_name="Groceries")

    with pytest.raises(ImmutableFieldError):
        transaction_service.update_transaction(USER, txn.id, **changes)


def test_update_confirmed_narration_allowed(transaction_service, make_transaction):
    txn = make_transaction()
    transaction_service.confirm_transaction(USER, txn.id, ledger_name="Groceries")

    updated = transaction_service.update_transaction(USER, txn.id, narration="Corrected")

    assert updated.narration == "Corrected"


def test_update_unconfirmed_fields(transaction_service, make_transaction):
    txn = make_transaction()

    updated = transaction_service.update_transaction(
        USER, txn.id, amount=Decimal("99.50"), direction="credit", date=date(2024, 2, 2)
    )

    assert updated.amount == Decimal("99.50")
    assert updated.direction is Direction.CREDIT
    assert updated.date == date(2024, 2, 2)


def test_update_description_clears_suggestion(ai_transaction_service, make_transaction):
    txn = make_transaction(description="POS SHELL FUEL")
    ai_transaction_service.suggest_for_transaction(USER, txn.id)

    updated = ai_transaction_service.update_transaction(USER, txn.id, description="POS SHELL")

    assert updated.state is TransactionState.IMPORTED
    assert updated.suggested_ledger_name is None
    assert updated.ai_suggested is False


def test_update_unknown_field_rejected(transaction_service, make_transaction):
    txn = make_transaction()

    with pytest.raises(ValidationError, match="Unknown transaction field"):
        transaction_service.update_transaction(USER, txn.id, color="blue")


def test_delete_transaction(transaction_service, make_transaction):
    txn = make_transaction()
    transaction_service.delete_transaction(USER, txn.id)

    assert transaction_service.get_transaction(USER, txn.id) is None
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(USER, txn.id)


def test_list_transactions_newest_first_ties_by_insertion(transaction_service, make_transaction):
    older = make_transaction(description="A", txn_date=date(2024, 3, 1))
    tie_first = make_transaction(description="B", txn_date=date(2024, 3, 5))
    tie_second = make_transaction(description="C", txn_date=date(2024, 3, 5))

    ids = [t.id for t in transaction_service.list_transactions(USER)]

    assert ids == [tie_second.id, tie_first.id, older.id]


def test_list_transactions_filters(transaction_service, make_transaction, sample_bank_account):
    make_transaction(description="cash", txn_date=date(2024, 3, 1))
    bank = make_transaction(
        description="bank", txn_date=date(2024, 3, 20), bank_account_id=sample_bank_account.id
    )

    assert [t.id for t in transaction_service.list_transactions(USER, bank_account_id=sample_bank_account.id)] == [bank.id]
    assert [t.description for t in transaction_service.list_transactions(USER, cash_only=True)] == ["cash"]
    assert [t.description for t in transaction_service.list_transactions(USER, start_date=date(2024, 3, 10))] == ["bank"]
    assert transaction_service.list_transactions(OTHER_USER) == []


def test_import_transactions_suggests_each_row(ai_transaction_service, fake_suggester):
    rows = [
        RawTransaction(date(2024, 3, 1), "POS SHELL FUEL", Decimal("1500"), Direction.DEBIT),
        RawTransaction(date(2024, 3, 2), "POS HP FUEL", Decimal("900"), Direction.DEBIT, Decimal("100")),
    ]

    imported = ai_transaction_service.import_transactions(USER, rows)

    assert [t.state for t in imported] == [TransactionState.SUGGESTED] * 2
    assert imported[1].balance_after == Decimal("100")
    # Known ledger names are loaded once and handed to every call
    assert fake_suggester.calls[0][3] == fake_suggester.calls[1][3]


def test_import_transactions_without_suggestions(transaction_service):
    rows = [RawTransaction(date(2024, 3, 1), "ANYTHING", Decimal("10"), Direction.CREDIT)]

    imported = transaction_service.import_transactions(USER, rows, suggest=False)

    assert imported[0].state is TransactionState.IMPORTED


def test_related_transaction_link(make_transaction):
    original = make_transaction(description="Loan to Bob")
    repayment = make_transaction(
        description="Bob repays", direction=Direction.CREDIT, related_transaction_id=original.id
    )

    assert repayment.related_transaction_id == original.id
