"""Builders for domain records used across tests"""

from datetime import date, time
from decimal import Decimal

from ops_console.domain.models import BankTransaction, RosterEntry, WorkingHour


def make_transaction(txn_id, account_id, txn_type, amount, day=date(2024, 1, 15), **kwargs) -> BankTransaction:
    return BankTransaction(
        id=txn_id,
        bank_account_id=account_id,
        type=txn_type,
        amount=Decimal(amount),
        date=day,
        **kwargs,
    )


def make_working_hour(wh_id, profile_id, hours, day=date(2024, 1, 10), status="approved", **kwargs) -> WorkingHour:
    return WorkingHour(
        id=wh_id,
        profile_id=profile_id,
        date=day,
        total_hours=Decimal(hours),
        status=status,
        **kwargs,
    )


def make_roster(roster_id="r1", is_locked=False, **kwargs) -> RosterEntry:
    fields = dict(
        id=roster_id,
        profile_id="p1",
        date=date(2024, 1, 10),
        start_time=time(9, 0),
        end_time=time(17, 0),
        total_hours=Decimal("8.00"),
        is_locked=is_locked,
    )
    fields.update(kwargs)
    return RosterEntry(**fields)
