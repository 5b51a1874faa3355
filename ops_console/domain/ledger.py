"""Transaction ledger read model - filtering and display ordering"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from ops_console.domain.exceptions import ValidationError
from ops_console.domain.models import TRANSACTION_TYPES, BankTransaction
from ops_console.utils.date_utils import validate_period


@dataclass(frozen=True)
class TransactionFilter:
    """All fields optional; an unset field matches everything"""

    bank_account_id: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    type: Optional[str] = None

    def __post_init__(self):
        if self.type is not None and self.type not in TRANSACTION_TYPES:
            raise ValidationError(f"Unknown transaction type {self.type!r}")
        if self.date_from is not None and self.date_to is not None:
            validate_period(self.date_from, self.date_to)

    def matches(self, txn: BankTransaction) -> bool:
        if self.bank_account_id is not None and txn.bank_account_id != self.bank_account_id:
            return False
        if self.date_from is not None and txn.date < self.date_from:
            return False
        if self.date_to is not None and txn.date > self.date_to:
            return False
        if self.type is not None and txn.type != self.type:
            return False
        return True


def ledger_sort_key(txn: BankTransaction):
    # Missing created_at sorts as oldest within its day
    created = txn.created_at.timestamp() if txn.created_at is not None else float("-inf")
    return (txn.date, created)


def order_transactions(transactions: Iterable[BankTransaction]) -> List[BankTransaction]:
    """Newest first: date descending, then creation time descending"""
    return sorted(transactions, key=ledger_sort_key, reverse=True)


def list_transactions(
    transactions: Iterable[BankTransaction],
    txn_filter: Optional[TransactionFilter] = None,
    limit: Optional[int] = None,
) -> List[BankTransaction]:
    """
    Filter an already-materialized transaction set and order it for display.

    Returns a fresh list on every call; the input is not modified.
    """
    txn_filter = txn_filter or TransactionFilter()
    ordered = order_transactions(t for t in transactions if txn_filter.matches(t))
    if limit is not None:
        if limit < 0:
            raise ValidationError(f"limit must be >= 0, got {limit}")
        return ordered[:limit]
    return ordered
