from datetime import date, timedelta
from decimal import Decimal

import pytest

from farmshare.errors import ValidationError
from farmshare.models import Booking
from farmshare.models.booking import TOTAL_COST_PRECISION
from farmshare.services.pricing import MAX_PRICE_PER_DAY, calculate_cost, parse_date, parse_price, rental_days


def test_same_day_rental_costs_one_day():
    day = date(2024, 5, 17)
    assert calculate_cost(day, day, Decimal("1500")) == Decimal("1500.00")


@pytest.mark.parametrize("extra_days", [0, 1, 2, 6, 30, 365])
def test_cost_counts_both_start_and_end_day(extra_days):
    start = date(2024, 1, 1)
    end = start + timedelta(days=extra_days)
    assert calculate_cost(start, end, 800) == Decimal(800 * (extra_days + 1)).quantize(Decimal("0.01"))


def test_cost_accepts_iso_strings():
    assert calculate_cost("2024-01-01", "2024-01-03", 1500) == Decimal("4500.00")


def test_cost_spans_month_and_leap_day():
    assert rental_days("2024-02-28", "2024-03-01") == 3


def test_fractional_rate_is_rounded_to_cents_before_multiplying():
    assert calculate_cost("2024-01-01", "2024-01-03", "333.333") == Decimal("999.99")


@pytest.mark.parametrize("raw, stored", [("12.3456", Decimal("12.35")), ("0.01", Decimal("0.01")), (700, Decimal("700.00"))])
def test_parse_price_keeps_whole_cents(raw, stored):
    assert parse_price(raw) == stored


@pytest.mark.parametrize("raw", ["0.001", "0.004", "100000000", "1e40"])
def test_parse_price_rejects_rates_outside_the_column(raw):
    with pytest.raises(ValidationError):
        parse_price(raw)


def test_longest_possible_rental_fits_the_booking_cost_column():
    cost = calculate_cost(date.min, date.max, MAX_PRICE_PER_DAY)
    integer_digits = len(str(int(cost)))
    assert integer_digits <= TOTAL_COST_PRECISION - 2
    assert Booking.__table__.c.total_cost.type.precision == TOTAL_COST_PRECISION


def test_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        calculate_cost("2024-01-03", "2024-01-01", 1500)


@pytest.mark.parametrize("rate", [0, -10, "abc", None, "NaN"])
def test_non_positive_or_malformed_rate_is_rejected(rate):
    with pytest.raises(ValidationError):
        calculate_cost("2024-01-01", "2024-01-02", rate)


@pytest.mark.parametrize("raw", ["", "   ", "01/02/2024", "2024-13-01", None, 20240101])
def test_malformed_dates_are_rejected(raw):
    with pytest.raises(ValidationError):
        parse_date(raw)
