from datetime import date, datetime
from decimal import Decimal

import pytest

from billing_service.app.crud.billing.billing_errors import BillingErrorKind, ValidationError
from billing_service.app.crud.billing.billing_periods import (
    aligned_period, covered_days, current_month_period, cycle_length_days,
    parse_period_date, prorate, resolve_due_date,
)


def test_prorate_rounds_half_up_to_whole_units():
    assert prorate(Decimal("5000"), 30, 16) == Decimal("2667")
    assert prorate(Decimal("3000"), 30, 16) == Decimal("1600")
    assert prorate(Decimal("100"), 8, 1) == Decimal("13")


def test_prorate_returns_zero_without_days():
    assert prorate(Decimal("5000"), 0, 10) == Decimal("0")
    assert prorate(Decimal("5000"), 30, 0) == Decimal("0")
    assert prorate(Decimal("5000"), -1, 10) == Decimal("0")


def test_covered_days_is_inclusive():
    assert covered_days(date(2024, 6, 1), date(2024, 6, 30)) == 30
    assert covered_days(date(2024, 6, 15), date(2024, 6, 15)) == 1


def test_due_date_clamps_to_short_months():
    assert resolve_due_date(date(2024, 1, 20), 31) == date(2024, 1, 31)
    assert resolve_due_date(date(2024, 2, 20), 31) == date(2024, 2, 29)
    assert resolve_due_date(date(2023, 2, 20), 30) == date(2023, 2, 28)


def test_due_date_rolls_into_next_month_once_passed():
    assert resolve_due_date(date(2024, 6, 10), 5) == date(2024, 7, 5)
    assert resolve_due_date(date(2024, 1, 31), 30) == date(2024, 2, 29)
    assert resolve_due_date(date(2024, 12, 20), 1) == date(2025, 1, 1)


def test_due_date_same_day_is_not_rolled():
    assert resolve_due_date(date(2024, 6, 5), 5) == date(2024, 6, 5)


@pytest.mark.parametrize("due_day", [0, 32, -3])
def test_due_day_out_of_range(due_day):
    with pytest.raises(ValidationError) as exc:
        resolve_due_date(date(2024, 6, 1), due_day)
    assert exc.value.kind == BillingErrorKind.validation


def test_cycle_length_days():
    assert cycle_length_days("monthly", date(2024, 6, 1)) == 30
    assert cycle_length_days("monthly", date(2024, 2, 1)) == 29
    assert cycle_length_days("quarterly", date(2024, 1, 1)) == 91
    assert cycle_length_days("annually", date(2024, 1, 1)) == 366
    assert cycle_length_days("weekly", date(2024, 1, 1)) == 30


def test_aligned_period_per_cycle():
    monthly = aligned_period("monthly", date(2024, 2, 17))
    assert (monthly.period_start, monthly.period_end) == (date(2024, 2, 1), date(2024, 2, 29))

    quarterly = aligned_period("quarterly", date(2024, 1, 15))
    assert (quarterly.period_start, quarterly.period_end) == (date(2024, 1, 1), date(2024, 3, 31))

    annual = aligned_period("annually", date(2024, 5, 2))
    assert (annual.period_start, annual.period_end) == (date(2024, 5, 1), date(2025, 4, 30))


def test_current_month_period():
    period = current_month_period(date(2024, 12, 31))
    assert period.period_start == date(2024, 12, 1)
    assert period.period_end == date(2024, 12, 31)


def test_parse_period_date_accepts_dates_and_iso_strings():
    assert parse_period_date(date(2024, 6, 1)) == date(2024, 6, 1)
    assert parse_period_date(datetime(2024, 6, 1, 13, 45)) == date(2024, 6, 1)
    assert parse_period_date("2024-06-01") == date(2024, 6, 1)
    assert parse_period_date("2024-06-01T00:00:00Z") == date(2024, 6, 1)


@pytest.mark.parametrize("value", ["not-a-date", "", None, 20240601])
def test_parse_period_date_rejects_garbage(value):
    with pytest.raises(ValidationError):
        parse_period_date(value, "period start date")
