"""Tests for bank accounts."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.domain.bank_account import mask_account_number
from ledgerbook.domain.entities import Direction
from ledgerbook.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError

from conftest import OTHER_USER, USER


@pytest.mark.parametrize(
    "raw, masked",
    [(None, None), ("", None), ("1234", "1234"), ("5010 0012 3456 78", "****5678")],
)
def test_mask_account_number(raw, masked):
    assert mask_account_number(raw) == masked


def test_create_account_stores_masked_number_and_balance(sample_bank_account):
    assert sample_bank_account.account_number == "****5678"
    assert sample_bank_account.current_balance == Decimal("10000.00")
    assert sample_bank_account.is_active is True
    assert sample_bank_account.currency == "USD"


def test_create_account_duplicate_name(bank_account_service, sample_bank_account):
    with pytest.raises(ConflictError):
        bank_account_service.create_account(USER, "Main Current")


def test_create_account_requires_name(bank_account_service):
    with pytest.raises(ValidationError):
        bank_account_service.create_account(USER, " ")


def test_accounts_are_per_user(bank_account_service, sample_bank_account):
    assert bank_account_service.list_accounts(OTHER_USER) == []
    assert bank_account_service.get_account(OTHER_USER, sample_bank_account.id) is None


def test_rename_account(bank_account_service, sample_bank_account):
    bank_account_service.rename_account(USER, sample_bank_account.id, "Operating")

    assert bank_account_service.get_account(USER, sample_bank_account.id).name == "Operating"


def test_deactivate_hides_from_default_list(bank_account_service, sample_bank_account):
    bank_account_service.deactivate_account(USER, sample_bank_account.id)

    assert bank_account_service.list_accounts(USER) == []
    assert len(bank_account_service.list_accounts(USER, include_inactive=True)) == 1


def test_delete_account_blocked_by_transactions(
    bank_account_service, transaction_service, sample_bank_account
):
    transaction_service.create_transaction(
        USER, date(2024, 3, 1), "NEFT", Decimal("10"), Direction.CREDIT,
        bank_account_id=sample_bank_account.id,
    )

    with pytest.raises(DependencyError, match="Deactivate it instead"):
        bank_account_service.delete_account(USER, sample_bank_account.id)


def test_delete_unused_account(bank_account_service, sample_bank_account):
    bank_account_service.delete_account(USER, sample_bank_account.id)

    with pytest.raises(NotFoundError):
        bank_account_service.require_account(USER, sample_bank_account.id)
