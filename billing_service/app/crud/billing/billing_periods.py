"""
Date arithmetic for recurring billing.

All periods are inclusive calendar ranges of ``date`` objects: an invoice
for June covers 2024-06-01 .. 2024-06-30 and both days count.
"""
import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel

from shared.utils.enums import BillingCycle
from .billing_errors import ValidationError

DEFAULT_CYCLE_DAYS = 30

CYCLE_STEPS = {
    BillingCycle.monthly: relativedelta(months=1),
    BillingCycle.quarterly: relativedelta(months=3),
    BillingCycle.annually: relativedelta(years=1),
}


class BillingPeriod(BaseModel):
    period_start: date
    period_end: date


def _cycle_step(billing_cycle) -> relativedelta:
    try:
        return CYCLE_STEPS[BillingCycle(billing_cycle)]
    except ValueError:
        return CYCLE_STEPS[BillingCycle.monthly]


def parse_period_date(value: Union[date, datetime, str, None], field: str = "date") -> date:
    """Accept a date, datetime or ISO string; anything else is a ValidationError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    raise ValidationError(f"Invalid {field}: {value!r}")


def cycle_length_days(billing_cycle, reference_start: date) -> int:
    """Days from reference_start to the same calendar point one cycle later."""
    try:
        step = CYCLE_STEPS[BillingCycle(billing_cycle)]
    except ValueError:
        return DEFAULT_CYCLE_DAYS
    return ((reference_start + step) - reference_start).days


def aligned_period(billing_cycle, reference_date: date) -> BillingPeriod:
    period_start = reference_date.replace(day=1)
    period_end = period_start + _cycle_step(billing_cycle) - timedelta(days=1)
    return BillingPeriod(period_start=period_start, period_end=period_end)


def current_month_period(today: date) -> BillingPeriod:
    return aligned_period(BillingCycle.monthly, today)


def covered_days(period_start: date, period_end: date) -> int:
    return (period_end - period_start).days + 1


def round_amount(value: Decimal) -> Decimal:
    return Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def prorate(base_amount, total_days: int, actual_days: int) -> Decimal:
    if total_days <= 0 or actual_days <= 0:
        return Decimal("0")
    return round_amount(Decimal(base_amount) * actual_days / total_days)


def _clamped(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def resolve_due_date(issue_date: date, due_day: int) -> date:
    """
    The due_day of the issue month, or of the next month when that day has
    already passed. Short months clamp to their last day, so the result is
    never before issue_date.
    """
    if not 1 <= int(due_day) <= 31:
        raise ValidationError(f"Due day must be between 1 and 31, got {due_day}")

    due = _clamped(issue_date.year, issue_date.month, due_day)
    if due < issue_date:
        next_month = issue_date.replace(day=1) + relativedelta(months=1)
        due = _clamped(next_month.year, next_month.month, due_day)
    return due
