"""Date and time-of-day utilities"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from ops_console.domain.exceptions import InvalidPeriod, ValidationError

SECONDS_PER_HOUR = Decimal(3600)


def validate_period(start: date, end: date) -> None:
    """Raise InvalidPeriod unless start <= end (single-day periods are valid)"""
    if start is None or end is None:
        raise ValidationError("Pay period requires both a start and an end date")
    if start > end:
        raise InvalidPeriod(start, end)


def in_period(day: date, start: date, end: date) -> bool:
    """Inclusive on both ends"""
    return start <= day <= end


def parse_time(value) -> time:
    """Accept time objects or 'HH:MM' / 'HH:MM:SS' strings"""
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not value:
        raise ValidationError(f"Invalid time of day: {value!r}")
    try:
        return time.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid time of day: {value!r}") from e


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid date: {value!r}") from e


def hours_between(start_time: Optional[time], end_time: Optional[time]) -> Decimal:
    """
    Hours from start_time to end_time on the same day, floored at 0.

    A shift whose end is at or before its start counts as zero hours
    rather than wrapping past midnight.
    """
    if start_time is None or end_time is None:
        return Decimal(0)

    start_seconds = start_time.hour * 3600 + start_time.minute * 60 + start_time.second
    end_seconds = end_time.hour * 3600 + end_time.minute * 60 + end_time.second
    diff = Decimal(end_seconds - start_seconds) / SECONDS_PER_HOUR

    return max(Decimal(0), diff.quantize(Decimal("0.01")))
