"""Aggregations over payroll and working-hour records for reporting views"""

import calendar
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List

from ops_console.domain.models import PAYROLL_STATUSES, Payroll, Profile, WorkingHour
from ops_console.domain.payroll import recorded_hours


@dataclass(frozen=True)
class MonthlyPayroll:
    month: int  # 1-12
    label: str
    amount: Decimal
    count: int


@dataclass(frozen=True)
class EarnerTotal:
    profile_id: str
    name: str
    total: Decimal
    hours: Decimal


def payroll_by_month(payrolls: Iterable[Payroll], year: int) -> List[MonthlyPayroll]:
    """
    Twelve buckets of net pay for the given year.

    A payroll counts toward the month its pay period starts in.
    """
    amounts = [Decimal(0)] * 12
    counts = [0] * 12

    for payroll in payrolls:
        if payroll.pay_period_start.year != year:
            continue
        index = payroll.pay_period_start.month - 1
        amounts[index] += payroll.net_pay
        counts[index] += 1

    return [
        MonthlyPayroll(
            month=i + 1,
            label=calendar.month_abbr[i + 1],
            amount=amounts[i],
            count=counts[i],
        )
        for i in range(12)
    ]


def payroll_status_distribution(payrolls: Iterable[Payroll]) -> Dict[str, int]:
    distribution = {status: 0 for status in PAYROLL_STATUSES}
    for payroll in payrolls:
        if payroll.status in distribution:
            distribution[payroll.status] += 1
    return distribution


def top_earners(
    payrolls: Iterable[Payroll],
    profiles: Iterable[Profile],
    limit: int = 5,
) -> List[EarnerTotal]:
    """Profiles ranked by summed net pay, highest first"""
    names = {p.id: p.full_name for p in profiles}
    totals: Dict[str, Decimal] = {}
    hours: Dict[str, Decimal] = {}

    for payroll in payrolls:
        key = payroll.profile_id
        totals[key] = totals.get(key, Decimal(0)) + payroll.net_pay
        hours[key] = hours.get(key, Decimal(0)) + payroll.total_hours

    ranked = sorted(totals, key=lambda pid: totals[pid], reverse=True)
    return [
        EarnerTotal(
            profile_id=pid,
            name=names.get(pid, "Unknown"),
            total=totals[pid],
            hours=hours[pid],
        )
        for pid in ranked[:limit]
    ]


def pending_hours_total(working_hours: Iterable[WorkingHour]) -> Decimal:
    """Hours still waiting for approval, counted the way payroll will count them"""
    return sum(
        (recorded_hours(wh) for wh in working_hours if wh.status == "pending"),
        Decimal(0),
    )
