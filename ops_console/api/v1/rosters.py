"""/v1/rosters - scheduling, lock checks, edits and status changes"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ops_console.api.dependencies import get_request_id, get_store
from ops_console.api.errors import to_http_exception
from ops_console.api.v1.schemas import (
    RosterCreateRequest,
    RosterEditableResponse,
    RosterEditRequest,
    RosterListResponse,
    RosterSchema,
    RosterStatusRequest,
)
from ops_console.domain.exceptions import DomainException, RosterLocked
from ops_console.domain.roster import (
    apply_roster_edit,
    approved_count,
    build_roster_record,
    is_editable,
    rostered_hours_by_profile,
    total_rostered_hours,
    transition_roster_status,
)
from ops_console.infrastructure.observability.logging import log_roster_edit_rejected
from ops_console.infrastructure.observability.metrics import roster_edit_rejected_counter
from ops_console.infrastructure.repositories import RosterRepository, WorkingHourRepository
from ops_console.infrastructure.store.base import RecordStore
from ops_console.utils.date_utils import validate_period

router = APIRouter()


def _to_schema(roster) -> RosterSchema:
    return RosterSchema(
        id=roster.id,
        profile_id=roster.profile_id,
        date=roster.date,
        start_time=roster.start_time,
        end_time=roster.end_time,
        total_hours=roster.total_hours,
        status=roster.status,
        is_locked=roster.is_locked,
        client_id=roster.client_id,
        project_id=roster.project_id,
        notes=roster.notes,
    )


@router.get("/rosters", response_model=RosterListResponse)
def list_rosters(
    request: Request,
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    profile_id: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store),
):
    """Scheduled shifts in date order, with total rostered hours overall and per profile"""
    try:
        if date_from is not None and date_to is not None:
            validate_period(date_from, date_to)
        rosters = RosterRepository(store).list_range(date_from, date_to, profile_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    return RosterListResponse(
        rosters=[_to_schema(r) for r in rosters],
        total_hours=total_rostered_hours(rosters),
        hours_by_profile=rostered_hours_by_profile(rosters),
    )


@router.post("/rosters", response_model=RosterSchema, status_code=201)
def create_roster(body: RosterCreateRequest, request: Request, store: RecordStore = Depends(get_store)):
    """Schedule a shift; it starts pending and unlocked"""
    request_id = get_request_id(request)
    try:
        roster = RosterRepository(store).create(build_roster_record(body.model_dump()))
    except DomainException as e:
        raise to_http_exception(e, request_id)

    logging.info(
        "Roster created",
        extra={"request_id": request_id, "roster_id": roster.id, "profile_id": roster.profile_id},
    )
    return _to_schema(roster)


@router.get("/rosters/{roster_id}/editable", response_model=RosterEditableResponse)
def get_roster_editable(roster_id: str, request: Request, store: RecordStore = Depends(get_store)):
    """Whether shift details may still change, with the approval count for display"""
    try:
        roster = RosterRepository(store).get(roster_id)
        working_hours = WorkingHourRepository(store).list_for_roster(roster_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    count = approved_count(roster, working_hours)
    return RosterEditableResponse(
        roster_id=roster.id,
        editable=is_editable(roster, working_hours),
        approved_count=count,
        is_locked=roster.is_locked,
    )


@router.patch("/rosters/{roster_id}", response_model=RosterSchema)
def edit_roster(
    roster_id: str,
    body: RosterEditRequest,
    request: Request,
    store: RecordStore = Depends(get_store),
):
    """
    Change shift details.

    Rejected with 409 once the entry is locked or any linked working hour
    has been approved; nothing is written in that case.
    """
    request_id = get_request_id(request)
    roster_repo = RosterRepository(store)
    changes = body.model_dump(exclude_unset=True)

    try:
        roster = roster_repo.get(roster_id)
        working_hours = WorkingHourRepository(store).list_for_roster(roster_id)
        edited = apply_roster_edit(roster, working_hours, changes)
        saved = roster_repo.save(edited, [*changes, "total_hours"])
    except RosterLocked as e:
        roster_edit_rejected_counter.inc()
        log_roster_edit_rejected(request_id, roster_id, e.approved_count, e.is_locked)
        raise to_http_exception(e, request_id)
    except DomainException as e:
        raise to_http_exception(e, request_id)

    logging.info(
        "Roster updated",
        extra={"request_id": request_id, "roster_id": roster_id, "fields": sorted(changes)},
    )
    return _to_schema(saved)


@router.post("/rosters/{roster_id}/status", response_model=RosterSchema)
def change_roster_status(
    roster_id: str,
    body: RosterStatusRequest,
    request: Request,
    store: RecordStore = Depends(get_store),
):
    """Confirm or cancel a shift; allowed whether or not the details are locked"""
    roster_repo = RosterRepository(store)
    try:
        roster = roster_repo.get(roster_id)
        updated = transition_roster_status(roster, body.status)
        saved = roster_repo.save(updated, ["status"])
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    return _to_schema(saved)
