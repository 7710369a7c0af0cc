"""Unit tests for the in-memory account store and transaction log"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from transfer_gateway.domain.models import Account, TransactionCategory, TransactionDraft
from transfer_gateway.domain.ports import VersionConflictError


def make_draft(amount: str = "1.00") -> TransactionDraft:
    return TransactionDraft(
        from_account_id=1,
        to_account_id=2,
        amount=Decimal(amount),
        category=TransactionCategory.PAYMENT,
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        post_transfer_balance=Decimal("99.00"),
    )


def test_get_missing_account(account_store):
    assert account_store.get(42) is None


def test_add_account_rejects_duplicates_and_negative_balances(account_store):
    account_store.add_account(1, Decimal("1"))

    with pytest.raises(ValueError):
        account_store.add_account(1, Decimal("5"))
    with pytest.raises(ValueError):
        account_store.add_account(2, Decimal("-1"))


def test_save_all_bumps_versions(funded_accounts):
    """Test saved accounts come back one version ahead"""
    saved = funded_accounts.save_all([Account(1, Decimal("90.00"), 0), Account(2, Decimal("60.00"), 0)])

    assert [a.version for a in saved] == [1, 1]
    assert funded_accounts.get(1) == Account(1, Decimal("90.00"), 1)


def test_save_all_is_all_or_nothing(funded_accounts):
    """Test a stale second account prevents the first from being written"""
    with pytest.raises(VersionConflictError) as exc_info:
        funded_accounts.save_all([Account(1, Decimal("0.00"), 0), Account(2, Decimal("150.00"), 7)])

    assert exc_info.value.account_id == 2
    assert funded_accounts.get(1) == Account(1, Decimal("100.00"), 0)
    assert funded_accounts.get(2) == Account(2, Decimal("50.00"), 0)


def test_save_all_unknown_account_conflicts(account_store):
    with pytest.raises(VersionConflictError):
        account_store.save_all([Account(5, Decimal("1"), 0)])


def test_total_balance(funded_accounts):
    assert funded_accounts.total_balance() == Decimal("150.00")


def test_transaction_log_issues_monotonic_ids(transaction_log):
    """Test ids start at 1 and increase by one per append"""
    first = transaction_log.append(make_draft("1.00"))
    second = transaction_log.append(make_draft("2.00"))

    assert (first.id, second.id) == (1, 2)
    assert second.amount == Decimal("2.00")
    assert transaction_log.all() == [first, second]
