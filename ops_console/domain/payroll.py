"""Payroll engine - approved working hours to gross/net pay"""

from collections import Counter
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from ops_console.domain.exceptions import (
    InvalidTransition,
    UnknownProfile,
    ValidationError,
)
from ops_console.domain.models import (
    PAYROLL_STATUSES,
    Payroll,
    PayrollResult,
    Profile,
    WorkingHour,
)
from ops_console.utils.date_utils import in_period, validate_period
from ops_console.utils.money import quantize_money, to_decimal


@dataclass(frozen=True)
class DeductionPolicy:
    """
    How deductions are derived from gross pay.

    mode "flat": the same fixed amount for every payroll.
    mode "percentage": value percent of gross pay (e.g. 10 -> 10%).
    """

    mode: str = "flat"
    value: Decimal = Decimal(0)

    def __post_init__(self):
        object.__setattr__(self, "value", to_decimal(self.value, "deduction value"))
        if self.mode not in ("flat", "percentage"):
            raise ValidationError(f"Unknown deduction mode {self.mode!r}")
        if not self.value.is_finite() or self.value < 0:
            raise ValidationError(f"Deduction value must be >= 0, got {self.value}")
        if self.mode == "percentage" and self.value > 100:
            raise ValidationError(f"Deduction percentage must be <= 100, got {self.value}")

    def deductions_for(self, gross_pay: Decimal) -> Decimal:
        if self.mode == "percentage":
            return quantize_money(gross_pay * self.value / Decimal(100))
        return quantize_money(self.value)


def select_working_hours(
    profile_id: str,
    working_hours: Iterable[WorkingHour],
    period_start: date,
    period_end: date,
    client_id: Optional[str] = None,
    project_id: Optional[str] = None,
) -> List[WorkingHour]:
    """
    Approved records for the profile within [period_start, period_end].

    client_id / project_id narrow the match only when supplied.
    """
    return [
        wh
        for wh in working_hours
        if wh.profile_id == profile_id
        and wh.status == "approved"
        and in_period(wh.date, period_start, period_end)
        and (not client_id or wh.client_id == client_id)
        and (not project_id or wh.project_id == project_id)
    ]


def recorded_hours(working_hour: WorkingHour) -> Decimal:
    """actual_hours overrides total_hours when present"""
    if working_hour.actual_hours is not None:
        return working_hour.actual_hours
    return working_hour.total_hours


def compute_payroll_for_profile(
    profile: Profile,
    working_hours: Iterable[WorkingHour],
    period_start: date,
    period_end: date,
    deductions: Decimal = Decimal(0),
    client_id: Optional[str] = None,
    project_id: Optional[str] = None,
) -> PayrollResult:
    """
    Compute pay for one profile over a period.

    Pricing:
    - If every matching record carries payable_amount, gross pay is their sum.
    - Otherwise gross pay is total hours x the profile's current hourly rate.
    The two are never mixed within one result.

    Net pay is gross minus deductions and may be negative.

    Raises:
        InvalidPeriod: period_start > period_end
        UnknownProfile: work needs an hourly rate but the profile has none
        ValidationError: negative deductions or hourly rate
    """
    validate_period(period_start, period_end)

    deductions = to_decimal(deductions, "deductions")
    if deductions < 0:
        raise ValidationError(f"Deductions must be >= 0, got {deductions}")

    if profile.hourly_rate is not None and profile.hourly_rate < 0:
        raise ValidationError(
            f"Profile {profile.id} has negative hourly rate {profile.hourly_rate}"
        )

    matching = select_working_hours(
        profile.id, working_hours, period_start, period_end, client_id, project_id
    )

    total_hours = sum((recorded_hours(wh) for wh in matching), Decimal(0))

    if all(wh.payable_amount is not None for wh in matching):
        # Vacuously true for an empty period: nothing to price, gross is zero
        pricing = "payable_amount"
        gross_pay = sum((wh.payable_amount for wh in matching), Decimal(0))
    elif profile.hourly_rate is None:
        raise UnknownProfile(profile.id, "no hourly rate and no payable amounts to price the work")
    else:
        pricing = "hourly_rate"
        gross_pay = total_hours * profile.hourly_rate

    gross_pay = quantize_money(gross_pay)
    deductions = quantize_money(deductions)
    hourly_rate = profile.hourly_rate if profile.hourly_rate is not None else Decimal(0)

    return PayrollResult(
        profile_id=profile.id,
        pay_period_start=period_start,
        pay_period_end=period_end,
        total_hours=total_hours,
        hourly_rate=hourly_rate,
        gross_pay=gross_pay,
        deductions=deductions,
        net_pay=gross_pay - deductions,
        pricing=pricing,
        working_hour_ids=tuple(wh.id for wh in matching),
    )


def compute_bulk_payroll(
    profile_ids: Sequence[str],
    profiles: Iterable[Profile],
    working_hours: Iterable[WorkingHour],
    period_start: date,
    period_end: date,
    deduction_policy: DeductionPolicy,
    client_id: Optional[str] = None,
    project_id: Optional[str] = None,
) -> List[PayrollResult]:
    """
    One PayrollResult per profile id, in the order given.

    Each result depends only on its own profile and the shared read-only
    inputs, so callers may split profile_ids and compute chunks in parallel.

    Raises:
        InvalidPeriod: before any profile is processed
        UnknownProfile: a profile id is not among the supplied profiles
        ValidationError: a profile id is listed twice
    """
    validate_period(period_start, period_end)

    duplicates = sorted(pid for pid, n in Counter(profile_ids).items() if n > 1)
    if duplicates:
        raise ValidationError(f"Profile listed more than once: {', '.join(duplicates)}")

    profiles_by_id: Dict[str, Profile] = {p.id: p for p in profiles}
    hours = list(working_hours)

    results = []
    for profile_id in profile_ids:
        profile = profiles_by_id.get(profile_id)
        if profile is None:
            raise UnknownProfile(profile_id)

        # Price first so percentage deductions see the real gross
        priced = compute_payroll_for_profile(
            profile, hours, period_start, period_end,
            client_id=client_id, project_id=project_id,
        )
        deductions = deduction_policy.deductions_for(priced.gross_pay)
        results.append(
            replace(priced, deductions=deductions, net_pay=priced.gross_pay - deductions)
        )

    return results


def correct_payroll(
    payroll: Payroll,
    profile: Profile,
    working_hours: Iterable[WorkingHour],
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    deductions: Optional[Decimal] = None,
) -> PayrollResult:
    """
    Recompute an existing payroll from current approved hours.

    Period and deductions default to the stored ones. The profile's current
    hourly rate becomes the new snapshot.

    Raises:
        ValidationError: payroll already paid, or profile does not match
    """
    if payroll.status == "paid":
        raise ValidationError(f"Payroll {payroll.id} is paid and can no longer be corrected")
    if profile.id != payroll.profile_id:
        raise ValidationError(f"Payroll {payroll.id} belongs to {payroll.profile_id}, not {profile.id}")

    return compute_payroll_for_profile(
        profile,
        working_hours,
        period_start or payroll.pay_period_start,
        period_end or payroll.pay_period_end,
        deductions=payroll.deductions if deductions is None else deductions,
    )


def build_payroll_record(
    result: PayrollResult,
    status: str = "pending",
    bank_account_id: Optional[str] = None,
) -> dict:
    """Row for the payroll table; hourly_rate is the snapshot taken at calculation time"""
    if status not in PAYROLL_STATUSES:
        raise ValidationError(f"Unknown payroll status {status!r}")

    return {
        "profile_id": result.profile_id,
        "pay_period_start": result.pay_period_start,
        "pay_period_end": result.pay_period_end,
        "total_hours": result.total_hours,
        "hourly_rate": result.hourly_rate,
        "gross_pay": result.gross_pay,
        "deductions": result.deductions,
        "net_pay": result.net_pay,
        "status": status,
        "bank_account_id": bank_account_id,
    }


def advance_payroll_status(current: str, target: str) -> str:
    """
    Move a payroll forward through pending -> approved -> paid.

    Skipping a step (pending -> paid) is allowed; going back or
    staying put is not.
    """
    if current not in PAYROLL_STATUSES:
        raise ValidationError(f"Unknown payroll status {current!r}")
    if target not in PAYROLL_STATUSES:
        raise ValidationError(f"Unknown payroll status {target!r}")

    if PAYROLL_STATUSES.index(target) <= PAYROLL_STATUSES.index(current):
        raise InvalidTransition(current, target)
    return target


@dataclass(frozen=True)
class PreviewFigures:
    """What the caller was shown for one profile before committing"""

    profile_id: str
    gross_pay: Decimal
    working_hour_ids: frozenset = frozenset()


def stale_profiles(results: Iterable[PayrollResult], previewed: Iterable[PreviewFigures]) -> List[str]:
    """
    Profile ids whose freshly computed figures no longer match the preview.

    A result counts as stale when its gross pay differs, when a different
    set of working hours went into it, or when it was never previewed.
    """
    by_profile = {p.profile_id: p for p in previewed}
    stale = []
    for result in results:
        seen = by_profile.get(result.profile_id)
        if (
            seen is None
            or seen.gross_pay != result.gross_pay
            or seen.working_hour_ids != frozenset(result.working_hour_ids)
        ):
            stale.append(result.profile_id)
    return stale
