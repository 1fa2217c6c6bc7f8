from datetime import date
from decimal import Decimal

import pytest

from farmshare.errors import InvalidTransition, NotAvailable, NotFound, ValidationError
from farmshare.extensions import db
from farmshare.models import Booking, Equipment
from farmshare.services import BookingService, FarmerService


def _book(equipment, farmer, start="2024-01-01", end="2024-01-03", location="Village field 7"):
    return BookingService.create_booking(
        equipment_id=equipment.id,
        farmer_id=farmer.id,
        start_date=start,
        end_date=end,
        location=location,
    )


def _active_bookings(equipment_id):
    return Booking.query.filter_by(equipment_id=equipment_id, status="active").count()


def test_create_booking_rents_equipment_and_charges_inclusive_days(tractor, farmer):
    booking = _book(tractor, farmer)

    assert booking.status == "active"
    assert booking.total_cost == Decimal("4500.00")
    assert booking.start_date == date(2024, 1, 1)
    assert db.session.get(Equipment, tractor.id).status == "rented"
    assert _active_bookings(tractor.id) == 1


def test_create_booking_on_rented_equipment_is_rejected(tractor, farmer, other_farmer):
    _book(tractor, farmer)

    with pytest.raises(NotAvailable):
        _book(tractor, other_farmer, start="2024-02-01", end="2024-02-02")

    assert Booking.query.filter_by(equipment_id=tractor.id).count() == 1
    assert _active_bookings(tractor.id) == 1


def test_create_booking_for_unknown_equipment_is_not_available(catalog, farmer):
    with pytest.raises(NotAvailable):
        BookingService.create_booking(999, farmer.id, "2024-01-01", "2024-01-01", "Plot 4")
    assert Booking.query.count() == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"location": ""},
        {"location": "   "},
        {"location": None},
        {"start_date": None},
        {"end_date": "not-a-date"},
        {"equipment_id": "abc"},
        {"equipment_id": 0},
        {"farmer_id": -3},
        {"equipment_id": 1.9},
        {"equipment_id": "1.9"},
        {"farmer_id": True},
        {"location": "x" * 256},
        {"start_date": "2024-01-05", "end_date": "2024-01-01"},
    ],
)
def test_create_booking_validation_errors(tractor, farmer, overrides):
    fields = {
        "equipment_id": tractor.id,
        "farmer_id": farmer.id,
        "start_date": "2024-01-01",
        "end_date": "2024-01-03",
        "location": "Plot 4",
    }
    fields.update(overrides)

    with pytest.raises(ValidationError):
        BookingService.create_booking(**fields)
    assert Booking.query.count() == 0
    assert db.session.get(Equipment, tractor.id).status == "available"


def test_create_booking_accepts_digit_string_ids(tractor, farmer):
    booking = BookingService.create_booking(str(tractor.id), f" {farmer.id} ", "2024-01-01", "2024-01-01", "Plot 4")
    assert booking.equipment_id == tractor.id
    assert booking.farmer_id == farmer.id


def test_create_booking_accepts_location_at_column_limit(tractor, farmer):
    booking = _book(tractor, farmer, location="x" * 255)
    assert len(booking.location) == 255


def test_booking_for_farmer_registered_after_a_failed_lookup(tractor):
    with pytest.raises(ValidationError):
        BookingService.create_booking(tractor.id, 1, "2024-01-01", "2024-01-01", "Plot 4")

    late_farmer, _ = FarmerService.login_or_register("Meena", "7777777777")
    assert late_farmer.id == 1
    booking = _book(tractor, late_farmer)
    assert booking.farmer_id == late_farmer.id


def test_create_booking_for_unknown_farmer_is_rejected(tractor):
    with pytest.raises(ValidationError):
        BookingService.create_booking(tractor.id, 4242, "2024-01-01", "2024-01-03", "Plot 4")
    assert db.session.get(Equipment, tractor.id).status == "available"


def test_cancel_frees_equipment_and_repeated_cancel_is_a_no_op(tractor, farmer):
    booking = _book(tractor, farmer)
    for _ in range(3):
        BookingService.cancel_booking(booking.id)
        assert db.session.get(Equipment, tractor.id).status == "available"

    cancelled = db.session.get(Booking, booking.id)
    assert cancelled.status == "cancelled"
    assert cancelled.cancelled_at is not None
    assert BookingService.ledger_violations() == []


def test_complete_frees_equipment(tractor, farmer):
    booking = _book(tractor, farmer)
    BookingService.complete_booking(booking.id)

    assert db.session.get(Booking, booking.id).status == "completed"
    assert db.session.get(Booking, booking.id).completed_at is not None
    assert db.session.get(Equipment, tractor.id).status == "available"


def test_terminal_states_do_not_cross(tractor, farmer):
    booking = _book(tractor, farmer)
    BookingService.complete_booking(booking.id)

    with pytest.raises(InvalidTransition):
        BookingService.cancel_booking(booking.id)
    assert db.session.get(Booking, booking.id).status == "completed"


def test_closing_an_old_booking_never_frees_equipment_held_by_a_new_one(tractor, farmer, other_farmer):
    first = _book(tractor, farmer)
    BookingService.cancel_booking(first.id)
    second = _book(tractor, other_farmer, start="2024-03-01", end="2024-03-02")

    BookingService.cancel_booking(first.id)

    assert db.session.get(Equipment, tractor.id).status == "rented"
    assert db.session.get(Booking, second.id).status == "active"
    assert BookingService.ledger_violations() == []


def test_cancel_unknown_booking_raises_not_found(app):
    with pytest.raises(NotFound):
        BookingService.cancel_booking(12345)
    with pytest.raises(NotFound):
        BookingService.complete_booking(12345)


def test_total_cost_is_fixed_at_creation(tractor, farmer):
    booking = _book(tractor, farmer)
    tractor.price_per_day = Decimal("9999")
    db.session.commit()

    assert db.session.get(Booking, booking.id).total_cost == Decimal("4500.00")


def test_ledger_violations_detects_inconsistent_equipment(catalog, farmer):
    assert BookingService.ledger_violations() == []
    catalog[2].status = "rented"
    db.session.commit()

    assert BookingService.ledger_violations() == [catalog[2].id]


def test_bookings_for_farmer_are_newest_first_with_equipment_name(catalog, farmer, other_farmer):
    first = _book(catalog[0], farmer)
    second = _book(catalog[1], farmer, start="2024-04-01", end="2024-04-01")
    _book(catalog[2], other_farmer)

    rows = BookingService.bookings_for_farmer(farmer.id)

    assert [row["id"] for row in rows] == [second.id, first.id]
    assert rows[0]["equipment_name"] == "Combine Harvester"
    assert rows[0]["total_cost"] == 2500.0
