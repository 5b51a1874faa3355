"""Unit tests for roster lock and status rules"""

import pytest
from dataclasses import replace
from datetime import date, time
from decimal import Decimal
from ops_console.domain.exceptions import InvalidTransition, RosterLocked, ValidationError
from ops_console.domain.roster import (
    apply_roster_edit,
    approved_count,
    build_roster_record,
    calculate_total_hours,
    ensure_editable,
    is_editable,
    rostered_hours_by_profile,
    total_rostered_hours,
    transition_roster_status,
)
from factories import make_roster, make_working_hour


def test_editable_with_pending_hours_then_locked_after_approval():
    """Pending linked hour keeps the roster editable; approving it locks edits"""
    roster = make_roster()
    pending = make_working_hour("w1", "p1", "8", status="pending", roster_id="r1")

    assert is_editable(roster, [pending]) is True

    approved = replace(pending, status="approved")
    assert is_editable(roster, [approved]) is False


def test_not_editable_when_locked_without_approvals():
    roster = make_roster(is_locked=True)

    assert is_editable(roster, []) is False


def test_not_editable_when_approved_regardless_of_lock_flag():
    hours = [make_working_hour("w1", "p1", "8", roster_id="r1")]

    assert is_editable(make_roster(is_locked=False), hours) is False
    assert is_editable(make_roster(is_locked=True), hours) is False


def test_approvals_on_other_rosters_do_not_count():
    roster = make_roster()
    hours = [
        make_working_hour("w1", "p1", "8", roster_id="r2"),
        make_working_hour("w2", "p1", "8", roster_id=None),
        make_working_hour("w3", "p1", "8", status="rejected", roster_id="r1"),
    ]

    assert approved_count(roster, hours) == 0
    assert is_editable(roster, hours) is True


def test_approved_count_counts_records():
    roster = make_roster()
    hours = [
        make_working_hour("w1", "p1", "4", roster_id="r1"),
        make_working_hour("w2", "p1", "4", roster_id="r1"),
        make_working_hour("w3", "p1", "4", status="pending", roster_id="r1"),
    ]

    assert approved_count(roster, hours) == 2


def test_ensure_editable_raises_with_count():
    roster = make_roster()
    hours = [
        make_working_hour("w1", "p1", "4", roster_id="r1"),
        make_working_hour("w2", "p1", "4", roster_id="r1"),
    ]

    with pytest.raises(RosterLocked) as exc_info:
        ensure_editable(roster, hours)

    assert exc_info.value.approved_count == 2
    assert exc_info.value.roster_id == "r1"


def test_ensure_editable_locked_flag():
    with pytest.raises(RosterLocked) as exc_info:
        ensure_editable(make_roster(is_locked=True), [])

    assert exc_info.value.approved_count == 0
    assert exc_info.value.is_locked is True


@pytest.mark.parametrize(
    "start,end,expected",
    [
        ("09:00", "17:00", Decimal("8")),
        ("09:00", "13:30", Decimal("4.5")),
        ("17:00", "09:00", Decimal("0")),  # no wrap past midnight
        ("09:00", "09:00", Decimal("0")),
        (time(8, 15), time(8, 35), Decimal("0.33")),
    ],
)
def test_calculate_total_hours(start, end, expected):
    assert calculate_total_hours(start, end) == expected


def test_calculate_total_hours_rejects_garbage():
    with pytest.raises(ValidationError):
        calculate_total_hours("nine", "17:00")


def test_apply_roster_edit_recomputes_hours():
    roster = make_roster()

    edited = apply_roster_edit(roster, [], {"start_time": "10:00", "notes": "late start"})

    assert edited.start_time == time(10, 0)
    assert edited.total_hours == Decimal("7")
    assert edited.notes == "late start"
    assert roster.start_time == time(9, 0)  # original untouched


def test_apply_roster_edit_rejected_when_approved():
    roster = make_roster()
    hours = [make_working_hour("w1", "p1", "8", roster_id="r1")]

    with pytest.raises(RosterLocked) as exc_info:
        apply_roster_edit(roster, hours, {"notes": "changed"})

    assert exc_info.value.approved_count == 1


def test_apply_roster_edit_rejects_status_and_lock_fields():
    roster = make_roster()

    with pytest.raises(ValidationError):
        apply_roster_edit(roster, [], {"status": "confirmed"})
    with pytest.raises(ValidationError):
        apply_roster_edit(roster, [], {"is_locked": False})


def test_apply_roster_edit_parses_date():
    edited = apply_roster_edit(make_roster(), [], {"date": "2024-03-05"})

    assert edited.date == date(2024, 3, 5)


def test_apply_roster_edit_requires_profile():
    with pytest.raises(ValidationError):
        apply_roster_edit(make_roster(), [], {"profile_id": ""})


@pytest.mark.parametrize(
    "current,target",
    [("pending", "confirmed"), ("pending", "cancelled"), ("confirmed", "cancelled")],
)
def test_roster_status_transitions_allowed(current, target):
    roster = make_roster(status=current)

    assert transition_roster_status(roster, target).status == target


@pytest.mark.parametrize(
    "current,target",
    [("confirmed", "pending"), ("cancelled", "confirmed"), ("cancelled", "pending"), ("pending", "pending")],
)
def test_roster_status_transitions_rejected(current, target):
    with pytest.raises(InvalidTransition):
        transition_roster_status(make_roster(status=current), target)


def test_roster_status_change_ignores_edit_lock():
    """Status moves even after hours were approved against the shift"""
    roster = make_roster(is_locked=True)

    assert transition_roster_status(roster, "confirmed").status == "confirmed"


def test_rostered_hour_totals():
    rosters = [
        make_roster("r1", total_hours=Decimal("8")),
        make_roster("r2", total_hours=Decimal("4.5")),
        make_roster("r3", profile_id="p2", total_hours=Decimal("6")),
    ]

    assert total_rostered_hours(rosters) == Decimal("18.5")
    assert rostered_hours_by_profile(rosters) == {"p1": Decimal("12.5"), "p2": Decimal("6")}


def test_build_roster_record_derives_hours():
    record = build_roster_record({
        "profile_id": "p1",
        "date": "2024-01-10",
        "start_time": "08:30",
        "end_time": "17:00",
        "notes": "front desk",
    })

    assert record["date"] == date(2024, 1, 10)
    assert record["start_time"] == time(8, 30)
    assert record["total_hours"] == Decimal("8.50")
    assert record["status"] == "pending"
    assert record["is_locked"] is False
    assert record["notes"] == "front desk"


def test_build_roster_record_end_before_start_is_zero_hours():
    record = build_roster_record(
        {"profile_id": "p1", "date": date(2024, 1, 10), "start_time": time(22, 0), "end_time": time(6, 0)}
    )

    assert record["total_hours"] == Decimal("0")


@pytest.mark.parametrize("fields", [
    {"date": date(2024, 1, 10), "start_time": time(9, 0), "end_time": time(17, 0)},
    {"profile_id": "p1", "start_time": time(9, 0), "end_time": time(17, 0)},
    {"profile_id": "p1", "date": date(2024, 1, 10), "start_time": time(9, 0)},
    {"profile_id": "p1", "date": date(2024, 1, 10), "start_time": time(9, 0), "end_time": time(17, 0),
     "is_locked": True},
])
def test_build_roster_record_rejects_incomplete_or_unknown_fields(fields):
    with pytest.raises(ValidationError):
        build_roster_record(fields)
