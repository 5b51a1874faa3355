"""Data access layer - typed reads and writes over a RecordStore"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from ops_console.domain.exceptions import RecordNotFound
from ops_console.domain.ledger import TransactionFilter, list_transactions
from ops_console.domain.models import (
    BankAccount,
    BankTransaction,
    Payroll,
    Profile,
    RosterEntry,
    WorkingHour,
)
from ops_console.infrastructure.store.base import Order, RecordFilter, RecordStore
from ops_console.utils.date_utils import parse_date, parse_time
from ops_console.utils.money import to_decimal


def _decimal(value) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def _datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _time(value):
    return None if value is None else parse_time(value)


def profile_from_row(row: Dict[str, Any]) -> Profile:
    return Profile(
        id=row["id"],
        full_name=row["full_name"],
        role=row.get("role", "employee"),
        hourly_rate=_decimal(row.get("hourly_rate")),
        salary=_decimal(row.get("salary")),
        is_active=row.get("is_active", True),
        email=row.get("email"),
        employment_type=row.get("employment_type"),
    )


def bank_account_from_row(row: Dict[str, Any]) -> BankAccount:
    return BankAccount(
        id=row["id"],
        opening_balance=_decimal(row.get("opening_balance")) or Decimal(0),
        profile_id=row.get("profile_id"),
        bank_name=row.get("bank_name") or "",
        account_number=row.get("account_number") or "",
        is_primary=row.get("is_primary", False),
    )


def transaction_from_row(row: Dict[str, Any]) -> BankTransaction:
    return BankTransaction(
        id=row["id"],
        bank_account_id=row.get("bank_account_id"),
        type=row["type"],
        amount=to_decimal(row["amount"], "amount"),
        date=parse_date(row["date"]),
        category=row.get("category") or "",
        description=row.get("description") or "",
        client_id=row.get("client_id"),
        project_id=row.get("project_id"),
        profile_id=row.get("profile_id"),
        created_at=_datetime(row.get("created_at")),
    )


def working_hour_from_row(row: Dict[str, Any]) -> WorkingHour:
    return WorkingHour(
        id=row["id"],
        profile_id=row["profile_id"],
        date=parse_date(row["date"]),
        total_hours=_decimal(row.get("total_hours")) or Decimal(0),
        status=row["status"],
        client_id=row.get("client_id"),
        project_id=row.get("project_id"),
        start_time=_time(row.get("start_time")),
        end_time=_time(row.get("end_time")),
        roster_id=row.get("roster_id"),
        actual_hours=_decimal(row.get("actual_hours")),
        payable_amount=_decimal(row.get("payable_amount")),
    )


def roster_from_row(row: Dict[str, Any]) -> RosterEntry:
    return RosterEntry(
        id=row["id"],
        profile_id=row["profile_id"],
        date=parse_date(row["date"]),
        start_time=parse_time(row["start_time"]),
        end_time=parse_time(row["end_time"]),
        total_hours=_decimal(row.get("total_hours")) or Decimal(0),
        status=row.get("status", "pending"),
        is_locked=row.get("is_locked", False),
        client_id=row.get("client_id"),
        project_id=row.get("project_id"),
        notes=row.get("notes"),
    )


def payroll_from_row(row: Dict[str, Any]) -> Payroll:
    return Payroll(
        id=row["id"],
        profile_id=row["profile_id"],
        pay_period_start=parse_date(row["pay_period_start"]),
        pay_period_end=parse_date(row["pay_period_end"]),
        total_hours=to_decimal(row["total_hours"], "total_hours"),
        hourly_rate=to_decimal(row["hourly_rate"], "hourly_rate"),
        gross_pay=to_decimal(row["gross_pay"], "gross_pay"),
        deductions=to_decimal(row["deductions"], "deductions"),
        net_pay=to_decimal(row["net_pay"], "net_pay"),
        status=row.get("status", "pending"),
        bank_account_id=row.get("bank_account_id"),
    )


class ProfileRepository:
    """Repository for employee profiles"""

    def __init__(self, store: RecordStore):
        self.store = store

    def get(self, profile_id: str) -> Profile:
        row = self.store.fetch_one("profile", profile_id)
        if row is None:
            raise RecordNotFound("profile", profile_id)
        return profile_from_row(row)

    def list_active(self) -> List[Profile]:
        rows = self.store.fetch_many(
            "profile", RecordFilter(eq={"is_active": True}), order=[Order("full_name")]
        )
        return [profile_from_row(r) for r in rows]

    def list_by_ids(self, profile_ids: Sequence[str]) -> List[Profile]:
        wanted = set(profile_ids)
        rows = self.store.fetch_many("profile")
        return [profile_from_row(r) for r in rows if r["id"] in wanted]


class BankRepository:
    """Repository for bank accounts and their transactions"""

    def __init__(self, store: RecordStore):
        self.store = store

    def get_account(self, account_id: str) -> BankAccount:
        row = self.store.fetch_one("bank_account", account_id)
        if row is None:
            raise RecordNotFound("bank_account", account_id)
        return bank_account_from_row(row)

    def list_accounts(self) -> List[BankAccount]:
        rows = self.store.fetch_many("bank_account", order=[Order("bank_name")])
        return [bank_account_from_row(r) for r in rows]

    def list_transactions(
        self,
        txn_filter: Optional[TransactionFilter] = None,
        limit: Optional[int] = None,
    ) -> List[BankTransaction]:
        """
        Fresh query each call, newest first (date, then creation time).

        Rows are re-ordered locally so stores that omit created_at still get
        the ledger tie-break.
        """
        txn_filter = txn_filter or TransactionFilter()
        record_filter = RecordFilter(
            eq={
                k: v
                for k, v in (("bank_account_id", txn_filter.bank_account_id), ("type", txn_filter.type))
                if v is not None
            },
            gte={"date": txn_filter.date_from} if txn_filter.date_from else {},
            lte={"date": txn_filter.date_to} if txn_filter.date_to else {},
        )
        rows = self.store.fetch_many(
            "bank_transaction",
            record_filter,
            order=[Order("date", descending=True), Order("created_at", descending=True)],
            limit=limit,
        )
        return list_transactions((transaction_from_row(r) for r in rows), txn_filter, limit)

    def get_transaction(self, transaction_id: str) -> BankTransaction:
        row = self.store.fetch_one("bank_transaction", transaction_id)
        if row is None:
            raise RecordNotFound("bank_transaction", transaction_id)
        return transaction_from_row(row)

    def create_transaction(self, record: Dict[str, Any]) -> BankTransaction:
        return transaction_from_row(self.store.insert("bank_transaction", record))

    def update_transaction(self, transaction_id: str, record: Dict[str, Any]) -> BankTransaction:
        return transaction_from_row(self.store.update("bank_transaction", transaction_id, record))

    def delete_transaction(self, transaction_id: str) -> None:
        self.store.delete("bank_transaction", transaction_id)


class WorkingHourRepository:
    """Repository for logged working hours"""

    def __init__(self, store: RecordStore):
        self.store = store

    def list_approved(
        self,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> List[WorkingHour]:
        rows = self.store.fetch_many(
            "working_hour",
            RecordFilter(
                eq={"status": "approved"},
                gte={"date": period_start} if period_start else {},
                lte={"date": period_end} if period_end else {},
            ),
        )
        return [working_hour_from_row(r) for r in rows]

    def list_pending(self) -> List[WorkingHour]:
        rows = self.store.fetch_many("working_hour", RecordFilter(eq={"status": "pending"}))
        return [working_hour_from_row(r) for r in rows]

    def list_for_roster(self, roster_id: str) -> List[WorkingHour]:
        rows = self.store.fetch_many("working_hour", RecordFilter(eq={"roster_id": roster_id}))
        return [working_hour_from_row(r) for r in rows]


class RosterRepository:
    """Repository for scheduled shifts"""

    def __init__(self, store: RecordStore):
        self.store = store

    def get(self, roster_id: str) -> RosterEntry:
        row = self.store.fetch_one("roster", roster_id)
        if row is None:
            raise RecordNotFound("roster", roster_id)
        return roster_from_row(row)

    def list_range(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        profile_id: Optional[str] = None,
    ) -> List[RosterEntry]:
        rows = self.store.fetch_many(
            "roster",
            RecordFilter(
                eq={"profile_id": profile_id} if profile_id else {},
                gte={"date": date_from} if date_from else {},
                lte={"date": date_to} if date_to else {},
            ),
            order=[Order("date"), Order("start_time")],
        )
        return [roster_from_row(r) for r in rows]

    def create(self, record: Dict[str, Any]) -> RosterEntry:
        return roster_from_row(self.store.insert("roster", record))

    def save(self, roster: RosterEntry, fields: Sequence[str]) -> RosterEntry:
        """Persist only the named fields of an edited entry"""
        patch = {name: getattr(roster, name) for name in fields}
        return roster_from_row(self.store.update("roster", roster.id, patch))


class PayrollRepository:
    """Repository for pay records"""

    def __init__(self, store: RecordStore):
        self.store = store

    def get(self, payroll_id: str) -> Payroll:
        row = self.store.fetch_one("payroll", payroll_id)
        if row is None:
            raise RecordNotFound("payroll", payroll_id)
        return payroll_from_row(row)

    def list_all(self) -> List[Payroll]:
        rows = self.store.fetch_many("payroll", order=[Order("created_at", descending=True)])
        return [payroll_from_row(r) for r in rows]

    def create_many(self, records: Sequence[Dict[str, Any]]) -> List[Payroll]:
        return [payroll_from_row(r) for r in self.store.insert_many("payroll", records)]

    def update_status(self, payroll_id: str, status: str) -> Payroll:
        return payroll_from_row(self.store.update("payroll", payroll_id, {"status": status}))

    def update(self, payroll_id: str, record: Dict[str, Any]) -> Payroll:
        return payroll_from_row(self.store.update("payroll", payroll_id, record))

    def delete(self, payroll_id: str) -> None:
        self.store.delete("payroll", payroll_id)
