"""Integration tests for the SQLAlchemy-backed record store"""

import pytest
from datetime import date, datetime, time
from decimal import Decimal
from ops_console.domain.exceptions import ConstraintError, RecordNotFound, ValidationError
from ops_console.domain.ledger import TransactionFilter
from ops_console.infrastructure.repositories import BankRepository, RosterRepository, WorkingHourRepository
from ops_console.infrastructure.store.base import Order, RecordFilter

pytestmark = pytest.mark.integration


@pytest.fixture
def seeded(store):
    store.insert("profile", {"id": "p1", "full_name": "Alice Smith", "hourly_rate": Decimal("25.00")})
    store.insert("bank_account", {"id": "acc1", "bank_name": "Westpac", "opening_balance": Decimal("1000.00")})
    return store


def test_insert_assigns_id_and_timestamps(store):
    row = store.insert("profile", {"full_name": "Generated Id"})

    assert row["id"]
    assert row["created_at"] is not None
    assert row["updated_at"] is not None
    assert row["is_active"] is True


def test_fetch_many_filters_and_orders(seeded):
    for i, day in enumerate([date(2024, 1, 5), date(2024, 1, 20), date(2024, 2, 2)]):
        seeded.insert(
            "bank_transaction",
            {"id": f"t{i}", "bank_account_id": "acc1", "type": "deposit", "amount": Decimal("10.00"), "date": day},
        )

    rows = seeded.fetch_many(
        "bank_transaction",
        RecordFilter(gte={"date": date(2024, 1, 1)}, lte={"date": date(2024, 1, 31)}),
        order=[Order("date", descending=True)],
    )

    assert [r["id"] for r in rows] == ["t1", "t0"]


def test_fetch_many_limit(seeded):
    for i in range(5):
        seeded.insert("profile", {"id": f"x{i}", "full_name": f"Person {i}"})

    assert len(seeded.fetch_many("profile", limit=3)) == 3


def test_fetch_many_unknown_column(seeded):
    with pytest.raises(ValidationError):
        seeded.fetch_many("profile", RecordFilter(eq={"nickname": "al"}))


def test_unknown_entity(store):
    with pytest.raises(ValidationError):
        store.fetch_many("invoice")


def test_update_and_fetch_one(seeded):
    updated = seeded.update("profile", "p1", {"hourly_rate": Decimal("30.00")})

    assert updated["hourly_rate"] == Decimal("30.00")
    assert seeded.fetch_one("profile", "p1")["hourly_rate"] == Decimal("30.00")


def test_update_missing_row(seeded):
    with pytest.raises(RecordNotFound):
        seeded.update("profile", "nope", {"full_name": "X"})


def test_update_cannot_change_id(seeded):
    with pytest.raises(ValidationError):
        seeded.update("profile", "p1", {"id": "p2"})


def test_delete(seeded):
    seeded.delete("bank_account", "acc1")

    assert seeded.fetch_one("bank_account", "acc1") is None
    with pytest.raises(RecordNotFound):
        seeded.delete("bank_account", "acc1")


def test_foreign_key_violation_is_constraint_error(seeded):
    with pytest.raises(ConstraintError):
        seeded.insert(
            "working_hour",
            {"profile_id": "ghost", "date": date(2024, 1, 1), "total_hours": Decimal("8"), "status": "approved"},
        )


def test_insert_many_is_all_or_nothing(seeded):
    records = [
        {"profile_id": "p1", "pay_period_start": date(2024, 1, 1), "pay_period_end": date(2024, 1, 31)},
        {"profile_id": "ghost", "pay_period_start": date(2024, 1, 1), "pay_period_end": date(2024, 1, 31)},
    ]

    with pytest.raises(ConstraintError):
        seeded.insert_many("payroll", records)

    assert seeded.fetch_many("payroll") == []


def test_bank_repository_lists_newest_first(seeded):
    bank_repo = BankRepository(seeded)
    seeded.insert("bank_transaction", {
        "id": "a", "bank_account_id": "acc1", "type": "deposit", "amount": Decimal("5.00"),
        "date": date(2024, 1, 3), "created_at": datetime(2024, 1, 3, 8, 0),
    })
    seeded.insert("bank_transaction", {
        "id": "b", "bank_account_id": "acc1", "type": "withdrawal", "amount": Decimal("2.00"),
        "date": date(2024, 1, 3), "created_at": datetime(2024, 1, 3, 17, 0),
    })
    seeded.insert("bank_transaction", {
        "id": "c", "bank_account_id": "acc1", "type": "deposit", "amount": Decimal("1.00"),
        "date": date(2024, 1, 1), "created_at": datetime(2024, 1, 5, 9, 0),
    })

    txns = bank_repo.list_transactions()
    withdrawals = bank_repo.list_transactions(TransactionFilter(type="withdrawal"))

    assert [t.id for t in txns] == ["b", "a", "c"]
    assert [t.id for t in withdrawals] == ["b"]
    assert txns[0].amount == Decimal("2.00")


def test_roster_and_working_hour_round_trip(seeded):
    seeded.insert("roster", {
        "id": "r1", "profile_id": "p1", "date": date(2024, 1, 10),
        "start_time": time(9, 0), "end_time": time(17, 0), "total_hours": Decimal("8"),
    })
    seeded.insert("working_hour", {
        "id": "w1", "profile_id": "p1", "roster_id": "r1", "date": date(2024, 1, 10),
        "total_hours": Decimal("8"), "status": "approved",
    })

    roster = RosterRepository(seeded).get("r1")
    hours = WorkingHourRepository(seeded).list_for_roster("r1")

    assert roster.start_time == time(9, 0)
    assert roster.is_locked is False
    assert [wh.id for wh in hours] == ["w1"]
    assert hours[0].total_hours == Decimal("8")
