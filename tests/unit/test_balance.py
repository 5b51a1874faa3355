"""Unit tests for bank balance derivation"""

import pytest
from decimal import Decimal
from ops_console.domain.balance import (
    compute_account_balance,
    compute_total_balance,
    summarize_transactions,
    validate_transaction,
)
from ops_console.domain.exceptions import ValidationError
from ops_console.domain.models import BankAccount
from factories import make_transaction


def test_account_balance_deposit_and_withdrawal(account):
    """Opening 1000.00 + deposit 500.00 - withdrawal 200.00 = 1300.00"""
    transactions = [
        make_transaction("t1", "acc1", "deposit", "500.00"),
        make_transaction("t2", "acc1", "withdrawal", "200.00"),
    ]

    assert compute_account_balance(account, transactions) == Decimal("1300.00")


def test_account_balance_ignores_other_accounts(account):
    """Only transactions for this account are folded in"""
    transactions = [
        make_transaction("t1", "acc1", "deposit", "50.00"),
        make_transaction("t2", "acc2", "deposit", "999.00"),
        make_transaction("t3", None, "withdrawal", "10.00"),
    ]

    assert compute_account_balance(account, transactions) == Decimal("1050.00")


def test_account_balance_no_transactions(account):
    assert compute_account_balance(account, []) == Decimal("1000.00")


def test_account_balance_negative_opening_balance():
    """Overdrawn accounts can go further negative"""
    account = BankAccount(id="od", opening_balance=Decimal("-250.00"))
    transactions = [make_transaction("t1", "od", "withdrawal", "100.00")]

    assert compute_account_balance(account, transactions) == Decimal("-350.00")


def test_account_balance_order_independent(account):
    transactions = [
        make_transaction("t1", "acc1", "deposit", "10.10"),
        make_transaction("t2", "acc1", "withdrawal", "3.03"),
        make_transaction("t3", "acc1", "deposit", "0.01"),
    ]

    forward = compute_account_balance(account, transactions)
    backward = compute_account_balance(account, list(reversed(transactions)))

    assert forward == backward == Decimal("1007.08")


def test_account_balance_is_idempotent(account):
    transactions = [make_transaction("t1", "acc1", "deposit", "500.00")]

    first = compute_account_balance(account, transactions)
    second = compute_account_balance(account, transactions)

    assert first == second
    assert len(transactions) == 1  # input not consumed or mutated


def test_account_balance_matches_explicit_sums(account):
    """balance == opening + sum(deposits) - sum(withdrawals)"""
    transactions = [
        make_transaction(f"t{i}", "acc1", "deposit" if i % 2 else "withdrawal", f"{i}.25")
        for i in range(1, 11)
    ]

    deposits = sum(t.amount for t in transactions if t.type == "deposit")
    withdrawals = sum(t.amount for t in transactions if t.type == "withdrawal")

    assert compute_account_balance(account, transactions) == (
        account.opening_balance + deposits - withdrawals
    )


def test_account_balance_rejects_negative_amount(account):
    transactions = [make_transaction("t1", "acc1", "deposit", "-5.00")]

    with pytest.raises(ValidationError):
        compute_account_balance(account, transactions)


def test_account_balance_rejects_non_finite_amount(account):
    transactions = [make_transaction("t1", "acc1", "deposit", "NaN")]

    with pytest.raises(ValidationError):
        compute_account_balance(account, transactions)


def test_account_balance_rejects_unknown_type(account):
    transactions = [make_transaction("t1", "acc1", "refund", "5.00")]

    with pytest.raises(ValidationError):
        compute_account_balance(account, transactions)


def test_total_balance_equals_sum_of_accounts():
    """Aggregation commutes with per-account folding"""
    accounts = [
        BankAccount(id="a", opening_balance=Decimal("100.00")),
        BankAccount(id="b", opening_balance=Decimal("-20.00")),
        BankAccount(id="c", opening_balance=Decimal("0.00")),
    ]
    transactions = [
        make_transaction("t1", "a", "deposit", "40.00"),
        make_transaction("t2", "b", "withdrawal", "15.50"),
        make_transaction("t3", "c", "deposit", "7.25"),
        make_transaction("t4", "a", "withdrawal", "1.00"),
        make_transaction("t5", "zzz", "deposit", "1000.00"),  # no such account
    ]

    total = compute_total_balance(accounts, transactions)

    assert total == sum(compute_account_balance(a, transactions) for a in accounts)
    assert total == Decimal("110.75")


def test_total_balance_accepts_generator(account):
    transactions = (make_transaction(f"t{i}", "acc1", "deposit", "1.00") for i in range(3))
    other = BankAccount(id="acc2", opening_balance=Decimal("5.00"))

    assert compute_total_balance([account, other], transactions) == Decimal("1008.00")


def test_summarize_transactions():
    transactions = [
        make_transaction("t1", "acc1", "deposit", "500.00"),
        make_transaction("t2", "acc2", "withdrawal", "200.00"),
        make_transaction("t3", None, "deposit", "25.00"),
    ]

    summary = summarize_transactions(transactions)

    assert summary.total_income == Decimal("525.00")
    assert summary.total_expense == Decimal("200.00")
    assert summary.net == Decimal("325.00")
    assert summary.transaction_count == 3


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1.00"), Decimal("Infinity")])
def test_validate_transaction_rejects_non_positive(amount):
    with pytest.raises(ValidationError):
        validate_transaction("deposit", amount)


def test_validate_transaction_rejects_unknown_type():
    with pytest.raises(ValidationError):
        validate_transaction("transfer", Decimal("10.00"))


def test_validate_transaction_accepts_positive():
    validate_transaction("withdrawal", Decimal("0.01"))


@pytest.mark.parametrize("amount", [Decimal("0.004"), Decimal("10.001")])
def test_validate_transaction_rejects_fractions_of_a_cent(amount):
    with pytest.raises(ValidationError):
        validate_transaction("deposit", amount)


def test_validate_transaction_accepts_trailing_zero_precision():
    validate_transaction("deposit", Decimal("120.500"))
