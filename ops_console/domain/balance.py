"""Bank balance derivation - opening balance plus signed transaction fold"""

from decimal import Decimal
from typing import Iterable, List

from ops_console.domain.exceptions import ValidationError
from ops_console.domain.models import BankAccount, BankTransaction, TransactionSummary
from ops_console.utils.money import quantize_money


def signed_amount(transaction: BankTransaction) -> Decimal:
    """
    Amount with the sign implied by the transaction type.

    Stored amounts are always non-negative; deposits add, withdrawals subtract.

    Raises:
        ValidationError: amount is not a finite non-negative decimal, or type is unknown
    """
    amount = transaction.amount
    if not isinstance(amount, Decimal) or not amount.is_finite() or amount < 0:
        raise ValidationError(
            f"Transaction {transaction.id} has invalid amount {amount!r}"
        )

    if transaction.type == "deposit":
        return amount
    if transaction.type == "withdrawal":
        return -amount
    raise ValidationError(
        f"Transaction {transaction.id} has unknown type {transaction.type!r}"
    )


def compute_account_balance(
    account: BankAccount,
    transactions: Iterable[BankTransaction],
) -> Decimal:
    """
    Current balance of one account.

    Takes the unfiltered transaction set and keeps only rows whose
    bank_account_id matches. Order of transactions does not matter.
    """
    running_total = sum(
        (signed_amount(t) for t in transactions if t.bank_account_id == account.id),
        Decimal(0),
    )
    return account.opening_balance + running_total


def compute_total_balance(
    accounts: Iterable[BankAccount],
    transactions: Iterable[BankTransaction],
) -> Decimal:
    """Sum of per-account balances; transactions not tied to a listed account are ignored"""
    txns: List[BankTransaction] = list(transactions)
    return sum(
        (compute_account_balance(account, txns) for account in accounts),
        Decimal(0),
    )


def summarize_transactions(transactions: Iterable[BankTransaction]) -> TransactionSummary:
    """Total income (deposits), total expense (withdrawals) and their difference"""
    total_income = Decimal(0)
    total_expense = Decimal(0)
    count = 0

    for txn in transactions:
        amount = signed_amount(txn)
        if amount >= 0:
            total_income += amount
        else:
            total_expense -= amount
        count += 1

    return TransactionSummary(
        total_income=total_income,
        total_expense=total_expense,
        net=total_income - total_expense,
        transaction_count=count,
    )


def validate_transaction(transaction_type: str, amount: Decimal) -> None:
    """Check a transaction before it is persisted: a positive amount in whole cents"""
    if transaction_type not in ("deposit", "withdrawal"):
        raise ValidationError(f"Unknown transaction type {transaction_type!r}")
    if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= 0:
        raise ValidationError(f"Transaction amount must be greater than 0, got {amount!r}")
    if amount != quantize_money(amount):
        raise ValidationError(f"Transaction amount has more than two decimal places: {amount}")
