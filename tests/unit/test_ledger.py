"""Unit tests for transaction ledger ordering and filtering"""

import pytest
from datetime import date, datetime
from ops_console.domain.exceptions import InvalidPeriod, ValidationError
from ops_console.domain.ledger import TransactionFilter, list_transactions, order_transactions
from factories import make_transaction


@pytest.fixture
def ledger():
    return [
        make_transaction("old", "acc1", "deposit", "10", day=date(2024, 1, 1),
                         created_at=datetime(2024, 1, 1, 9, 0)),
        make_transaction("new_late", "acc1", "withdrawal", "5", day=date(2024, 1, 3),
                         created_at=datetime(2024, 1, 3, 18, 0)),
        make_transaction("new_early", "acc2", "deposit", "7", day=date(2024, 1, 3),
                         created_at=datetime(2024, 1, 3, 8, 0)),
        make_transaction("mid", "acc2", "withdrawal", "3", day=date(2024, 1, 2),
                         created_at=datetime(2024, 1, 2, 12, 0)),
    ]


def test_order_date_desc_then_created_desc(ledger):
    ordered = order_transactions(ledger)

    assert [t.id for t in ordered] == ["new_late", "new_early", "mid", "old"]


def test_missing_created_at_sorts_last_within_day():
    txns = [
        make_transaction("no_ts", "acc1", "deposit", "1", day=date(2024, 1, 3)),
        make_transaction("ts", "acc1", "deposit", "1", day=date(2024, 1, 3),
                         created_at=datetime(2024, 1, 3, 8, 0)),
    ]

    assert [t.id for t in order_transactions(txns)] == ["ts", "no_ts"]


def test_filter_by_account(ledger):
    result = list_transactions(ledger, TransactionFilter(bank_account_id="acc2"))

    assert [t.id for t in result] == ["new_early", "mid"]


def test_filter_by_type_and_range(ledger):
    txn_filter = TransactionFilter(
        type="withdrawal", date_from=date(2024, 1, 2), date_to=date(2024, 1, 2)
    )

    assert [t.id for t in list_transactions(ledger, txn_filter)] == ["mid"]


def test_no_filter_returns_everything(ledger):
    assert len(list_transactions(ledger)) == 4


def test_limit(ledger):
    assert [t.id for t in list_transactions(ledger, limit=2)] == ["new_late", "new_early"]


def test_listing_is_restartable(ledger):
    """Each call is a fresh query over the same snapshot"""
    first = list_transactions(ledger)
    second = list_transactions(ledger)

    assert first == second
    assert first is not second


def test_filter_rejects_unknown_type():
    with pytest.raises(ValidationError):
        TransactionFilter(type="refund")


def test_filter_rejects_inverted_range():
    with pytest.raises(InvalidPeriod):
        TransactionFilter(date_from=date(2024, 2, 1), date_to=date(2024, 1, 1))


def test_negative_limit(ledger):
    with pytest.raises(ValidationError):
        list_transactions(ledger, limit=-1)
