"""Rental cost calculation shared by the booking engine and client previews."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from farmshare.errors import ValidationError

CENTS = Decimal("0.01")
# Largest value that fits equipment.price_per_day, Numeric(10, 2).
MAX_PRICE_PER_DAY = Decimal("99999999.99")


def parse_date(value, label="date"):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = (value or "").strip() if isinstance(value, str) else ""
    if not raw:
        raise ValidationError(f"{label.capitalize()} is required.")
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid {label}. Use YYYY-MM-DD.") from exc


def parse_price(value):
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("Price per day must be a positive number.") from exc
    if not price.is_finite() or price <= 0:
        raise ValidationError("Price per day must be a positive number.")
    if price > MAX_PRICE_PER_DAY:
        raise ValidationError("Price per day is too large.")
    price = price.quantize(CENTS)
    if price < CENTS:
        raise ValidationError("Price per day must be at least 0.01.")
    return price


def rental_days(start_date, end_date):
    """Number of billable days, counting both the start and the end day."""
    start = parse_date(start_date, "start date")
    end = parse_date(end_date, "end date")
    if end < start:
        raise ValidationError("End date cannot be before start date.")
    return (end - start).days + 1


def calculate_cost(start_date, end_date, price_per_day):
    days = rental_days(start_date, end_date)
    price = parse_price(price_per_day)
    return (price * Decimal(days)).quantize(CENTS)
