"""Roster rules - shift hours, edit lock and status transitions"""

from dataclasses import replace
from decimal import Decimal
from typing import Dict, Iterable, Mapping

from ops_console.domain.exceptions import InvalidTransition, RosterLocked, ValidationError
from ops_console.domain.models import ROSTER_STATUSES, RosterEntry, WorkingHour
from ops_console.utils.date_utils import hours_between, parse_date, parse_time

# Fields guarded by the edit lock. Status is not among them, it changes
# only through transition_roster_status.
EDITABLE_FIELDS = (
    "profile_id",
    "client_id",
    "project_id",
    "date",
    "start_time",
    "end_time",
    "notes",
)

ROSTER_TRANSITIONS = {
    "pending": ("confirmed", "cancelled"),
    "confirmed": ("cancelled",),
    "cancelled": (),
}


def calculate_total_hours(start_time, end_time) -> Decimal:
    """Scheduled hours for a shift, end minus start, never negative"""
    return hours_between(parse_time(start_time), parse_time(end_time))


def approved_count(roster: RosterEntry, working_hours: Iterable[WorkingHour]) -> int:
    """Number of approved working-hour records linked back to this roster"""
    return sum(
        1 for wh in working_hours
        if wh.roster_id == roster.id and wh.status == "approved"
    )


def is_editable(roster: RosterEntry, working_hours: Iterable[WorkingHour]) -> bool:
    """Editable only while unlocked and nothing has been approved against it"""
    return approved_count(roster, working_hours) == 0 and not roster.is_locked


def ensure_editable(roster: RosterEntry, working_hours: Iterable[WorkingHour]) -> None:
    """
    Raises:
        RosterLocked: carrying the approved count for display
    """
    count = approved_count(roster, working_hours)
    if count > 0 or roster.is_locked:
        raise RosterLocked(roster.id, count, is_locked=roster.is_locked)


def apply_roster_edit(
    roster: RosterEntry,
    working_hours: Iterable[WorkingHour],
    changes: Mapping[str, object],
) -> RosterEntry:
    """
    Return a new RosterEntry with changes applied.

    total_hours is recomputed from the (possibly new) start and end times.
    The input roster is left untouched.

    Raises:
        RosterLocked: roster is no longer editable
        ValidationError: change to a field outside EDITABLE_FIELDS
    """
    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Fields cannot be edited on a roster: {', '.join(unknown)}")

    ensure_editable(roster, working_hours)

    updates: Dict[str, object] = dict(changes)
    if "start_time" in updates:
        updates["start_time"] = parse_time(updates["start_time"])
    if "end_time" in updates:
        updates["end_time"] = parse_time(updates["end_time"])
    if "date" in updates:
        updates["date"] = parse_date(updates["date"])
    if not updates.get("profile_id", roster.profile_id):
        raise ValidationError("Roster entry requires a profile")

    edited = replace(roster, **updates)
    return replace(
        edited,
        total_hours=calculate_total_hours(edited.start_time, edited.end_time),
    )


def build_roster_record(fields: Mapping[str, object]) -> Dict[str, object]:
    """
    Row for a new roster entry: pending, unlocked, total_hours derived.

    Raises:
        ValidationError: unknown field, missing profile, date or times
    """
    unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown roster fields: {', '.join(unknown)}")
    if not fields.get("profile_id"):
        raise ValidationError("Roster entry requires a profile")
    for name in ("date", "start_time", "end_time"):
        if fields.get(name) is None:
            raise ValidationError(f"Roster entry requires {name}")

    record: Dict[str, object] = dict(fields)
    record["date"] = parse_date(fields["date"])
    record["start_time"] = parse_time(fields["start_time"])
    record["end_time"] = parse_time(fields["end_time"])
    record["total_hours"] = calculate_total_hours(record["start_time"], record["end_time"])
    record["status"] = "pending"
    record["is_locked"] = False
    return record


def transition_roster_status(roster: RosterEntry, target: str) -> RosterEntry:
    """pending -> confirmed -> cancelled, or pending -> cancelled"""
    if target not in ROSTER_STATUSES:
        raise ValidationError(f"Unknown roster status {target!r}")
    if target not in ROSTER_TRANSITIONS.get(roster.status, ()):
        raise InvalidTransition(roster.status, target)
    return replace(roster, status=target)


def total_rostered_hours(rosters: Iterable[RosterEntry]) -> Decimal:
    return sum((r.total_hours for r in rosters), Decimal(0))


def rostered_hours_by_profile(rosters: Iterable[RosterEntry]) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = {}
    for roster in rosters:
        totals[roster.profile_id] = totals.get(roster.profile_id, Decimal(0)) + roster.total_hours
    return totals
