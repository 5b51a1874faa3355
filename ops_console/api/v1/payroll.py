"""/v1/payroll - preview, commit, correction, deletion, status and reports"""

import logging
import time
from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from ops_console.api.dependencies import get_deduction_policy, get_request_id, get_store
from ops_console.api.errors import to_http_exception
from ops_console.api.v1.schemas import (
    EarnerSchema,
    MonthlyPayrollSchema,
    PayrollCommitResponse,
    PayrollCorrectionRequest,
    PayrollItem,
    PayrollPreviewResponse,
    PayrollReportResponse,
    PayrollRequest,
    PayrollSchema,
    PayrollStatusRequest,
)
from ops_console.domain.exceptions import DomainException
from ops_console.domain.models import PayrollResult
from ops_console.domain.payroll import (
    DeductionPolicy,
    PreviewFigures,
    advance_payroll_status,
    build_payroll_record,
    compute_bulk_payroll,
    correct_payroll,
    stale_profiles,
)
from ops_console.domain.reports import (
    payroll_by_month,
    payroll_status_distribution,
    pending_hours_total,
    top_earners,
)
from ops_console.infrastructure.observability.logging import log_payroll_run
from ops_console.infrastructure.observability.metrics import record_payroll
from ops_console.infrastructure.repositories import (
    PayrollRepository,
    ProfileRepository,
    WorkingHourRepository,
)
from ops_console.infrastructure.store.base import RecordStore
from ops_console.utils.date_utils import validate_period

router = APIRouter()


def _compute(body: PayrollRequest, store: RecordStore, policy: DeductionPolicy) -> List[PayrollResult]:
    """Load the inputs fresh and run the calculator"""
    validate_period(body.pay_period_start, body.pay_period_end)

    if body.deductions is not None:
        policy = DeductionPolicy(mode="flat", value=body.deductions)

    profile_repo = ProfileRepository(store)
    if body.profile_ids is None:
        profiles = profile_repo.list_active()
        profile_ids = [p.id for p in profiles]
    else:
        profiles = profile_repo.list_by_ids(body.profile_ids)
        profile_ids = body.profile_ids

    working_hours = WorkingHourRepository(store).list_approved(
        body.pay_period_start, body.pay_period_end
    )
    return compute_bulk_payroll(
        profile_ids,
        profiles,
        working_hours,
        body.pay_period_start,
        body.pay_period_end,
        policy,
        client_id=body.client_id,
        project_id=body.project_id,
    )


def _to_item(result: PayrollResult) -> PayrollItem:
    return PayrollItem(
        profile_id=result.profile_id,
        total_hours=result.total_hours,
        hourly_rate=result.hourly_rate,
        gross_pay=result.gross_pay,
        deductions=result.deductions,
        net_pay=result.net_pay,
        pricing=result.pricing,
        working_hour_ids=list(result.working_hour_ids),
    )


def _to_schema(payroll) -> PayrollSchema:
    return PayrollSchema(
        id=payroll.id,
        profile_id=payroll.profile_id,
        pay_period_start=payroll.pay_period_start,
        pay_period_end=payroll.pay_period_end,
        total_hours=payroll.total_hours,
        hourly_rate=payroll.hourly_rate,
        gross_pay=payroll.gross_pay,
        deductions=payroll.deductions,
        net_pay=payroll.net_pay,
        status=payroll.status,
        bank_account_id=payroll.bank_account_id,
    )


@router.post("/payroll/preview", response_model=PayrollPreviewResponse)
def preview_payroll(
    body: PayrollRequest,
    request: Request,
    store: RecordStore = Depends(get_store),
    policy: DeductionPolicy = Depends(get_deduction_policy),
):
    """Compute payroll for the selected profiles without writing anything"""
    start_time = time.time()
    try:
        results = _compute(body, store, policy)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    for result in results:
        record_payroll(result.pricing, result.net_pay, persisted=False)
    log_payroll_run(
        get_request_id(request), len(results), body.pay_period_start, body.pay_period_end,
        persisted=False, duration_ms=(time.time() - start_time) * 1000,
    )

    return PayrollPreviewResponse(
        pay_period_start=body.pay_period_start,
        pay_period_end=body.pay_period_end,
        items=[_to_item(r) for r in results],
        total_hours=sum((r.total_hours for r in results), Decimal(0)),
        total_net_pay=sum((r.net_pay for r in results), Decimal(0)),
    )


@router.post("/payroll", response_model=PayrollCommitResponse, status_code=201)
def create_payroll(
    body: PayrollRequest,
    request: Request,
    store: RecordStore = Depends(get_store),
    policy: DeductionPolicy = Depends(get_deduction_policy),
):
    """
    Compute and persist one payroll record per profile.

    Flow:
    1. Compute from a fresh read of approved working hours
    2. If the caller sends the figures it previewed, abort with 409 when
       any profile's gross pay or set of working hours has changed since
    3. Insert all records in one call (all or none)
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        results = _compute(body, store, policy)
        if body.expected is not None:
            stale = stale_profiles(
                results,
                [
                    PreviewFigures(e.profile_id, e.gross_pay, frozenset(e.working_hour_ids))
                    for e in body.expected
                ],
            )
            if stale:
                logging.warning(
                    "Payroll commit refused, figures changed since preview",
                    extra={"request_id": request_id, "profile_ids": stale},
                )
                raise HTTPException(
                    status_code=409,
                    detail={
                        "error": "payroll_changed",
                        "message": "Working hours changed since the preview; please preview again",
                        "profile_ids": stale,
                    },
                )

        records = [
            build_payroll_record(r, status=body.status, bank_account_id=body.bank_account_id)
            for r in results
        ]
        payrolls = PayrollRepository(store).create_many(records)
    except DomainException as e:
        raise to_http_exception(e, request_id)

    for result in results:
        record_payroll(result.pricing, result.net_pay, persisted=True)
    log_payroll_run(
        request_id, len(results), body.pay_period_start, body.pay_period_end,
        persisted=True, duration_ms=(time.time() - start_time) * 1000,
    )

    return PayrollCommitResponse(payrolls=[_to_schema(p) for p in payrolls])


@router.patch("/payroll/{payroll_id}/status", response_model=PayrollSchema)
def update_payroll_status(
    payroll_id: str,
    body: PayrollStatusRequest,
    request: Request,
    store: RecordStore = Depends(get_store),
):
    """Advance a payroll to approved or paid; never backwards"""
    payroll_repo = PayrollRepository(store)
    try:
        payroll = payroll_repo.get(payroll_id)
        status = advance_payroll_status(payroll.status, body.status)
        updated = payroll_repo.update_status(payroll_id, status)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    return _to_schema(updated)


@router.get("/payroll/reports", response_model=PayrollReportResponse)
def get_payroll_reports(
    request: Request,
    year: Optional[int] = Query(None, ge=1900, le=9999),
    limit: int = Query(5, ge=1, le=50),
    store: RecordStore = Depends(get_store),
):
    """Monthly net pay, status distribution, top earners and hours awaiting approval"""
    year = year or date.today().year
    try:
        payrolls = PayrollRepository(store).list_all()
        profiles = ProfileRepository(store).list_by_ids([p.profile_id for p in payrolls])
        pending = WorkingHourRepository(store).list_pending()
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    monthly = payroll_by_month(payrolls, year)
    return PayrollReportResponse(
        year=year,
        monthly=[
            MonthlyPayrollSchema(month=m.month, label=m.label, amount=m.amount, count=m.count)
            for m in monthly
        ],
        status_distribution=payroll_status_distribution(payrolls),
        top_earners=[
            EarnerSchema(profile_id=e.profile_id, name=e.name, total=e.total, hours=e.hours)
            for e in top_earners(payrolls, profiles, limit=limit)
        ],
        total_net_pay=sum((m.amount for m in monthly), Decimal(0)),
        pending_hours=pending_hours_total(pending),
    )


@router.put("/payroll/{payroll_id}", response_model=PayrollSchema)
def correct_payroll_record(
    payroll_id: str,
    body: PayrollCorrectionRequest,
    request: Request,
    store: RecordStore = Depends(get_store),
):
    """Recompute a pending or approved payroll from the hours approved now"""
    request_id = get_request_id(request)
    payroll_repo = PayrollRepository(store)
    try:
        payroll = payroll_repo.get(payroll_id)
        profile = ProfileRepository(store).get(payroll.profile_id)
        period_start = body.pay_period_start or payroll.pay_period_start
        period_end = body.pay_period_end or payroll.pay_period_end
        validate_period(period_start, period_end)
        working_hours = WorkingHourRepository(store).list_approved(period_start, period_end)

        result = correct_payroll(
            payroll, profile, working_hours, period_start, period_end, body.deductions
        )
        bank_account_id = (
            body.bank_account_id if "bank_account_id" in body.model_fields_set else payroll.bank_account_id
        )
        updated = payroll_repo.update(
            payroll_id,
            build_payroll_record(result, status=payroll.status, bank_account_id=bank_account_id),
        )
    except DomainException as e:
        raise to_http_exception(e, request_id)

    record_payroll(result.pricing, result.net_pay, persisted=True)
    logging.info(
        "Payroll corrected",
        extra={
            "request_id": request_id,
            "payroll_id": payroll_id,
            "gross_pay": str(payroll.gross_pay),
            "corrected_gross_pay": str(result.gross_pay),
        },
    )
    return _to_schema(updated)


@router.delete("/payroll/{payroll_id}", status_code=204)
def delete_payroll(payroll_id: str, request: Request, store: RecordStore = Depends(get_store)):
    """Hard delete a payroll record"""
    request_id = get_request_id(request)
    try:
        PayrollRepository(store).delete(payroll_id)
    except DomainException as e:
        raise to_http_exception(e, request_id)

    logging.info("Payroll deleted", extra={"request_id": request_id, "payroll_id": payroll_id})
    return Response(status_code=204)
