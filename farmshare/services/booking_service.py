import threading
from contextlib import contextmanager

from flask import current_app
from sqlalchemy import case, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from farmshare.errors import InvalidTransition, NotAvailable, NotFound, StorageError, ValidationError
from farmshare.extensions import db
from farmshare.models import Booking, Equipment, Farmer
from farmshare.models.base import utcnow
from farmshare.models.booking import BOOKING_ACTIVE, BOOKING_CANCELLED, BOOKING_COMPLETED, LOCATION_MAX_LENGTH
from farmshare.models.equipment import EQUIPMENT_AVAILABLE, EQUIPMENT_RENTED
from farmshare.services.farmer_service import FarmerService
from farmshare.services.pricing import calculate_cost, parse_date

BOOKING_TRANSITIONS = {
    BOOKING_ACTIVE: {BOOKING_CANCELLED, BOOKING_COMPLETED},
    BOOKING_CANCELLED: set(),
    BOOKING_COMPLETED: set(),
}


class EquipmentLocks:
    """Process-local mutual exclusion keyed by equipment id."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    def lock_for(self, equipment_id):
        with self._guard:
            return self._locks.setdefault(int(equipment_id), threading.Lock())

    @contextmanager
    def hold(self, equipment_id):
        lock = self.lock_for(equipment_id)
        with lock:
            yield


equipment_locks = EquipmentLocks()


class BookingService:
    @staticmethod
    def _parse_id(value, label):
        if isinstance(value, bool):
            raise ValidationError(f"Invalid {label}.")
        if isinstance(value, str) and value.strip().isdecimal():
            value = int(value.strip())
        if not isinstance(value, int) or value <= 0:
            raise ValidationError(f"Invalid {label}.")
        return value

    @staticmethod
    def _locked_equipment(equipment_id):
        stmt = (
            select(Equipment)
            .where(Equipment.id == equipment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def create_booking(equipment_id, farmer_id, start_date, end_date, location):
        required = (equipment_id, farmer_id, start_date, end_date, location)
        if any(value is None or (isinstance(value, str) and not value.strip()) for value in required):
            raise ValidationError("All fields are required.")

        equipment_id = BookingService._parse_id(equipment_id, "equipment id")
        farmer_id = BookingService._parse_id(farmer_id, "farmer id")
        start = parse_date(start_date, "start date")
        end = parse_date(end_date, "end date")
        if end < start:
            raise ValidationError("End date cannot be before start date.")
        if not isinstance(location, str):
            raise ValidationError("Location must be text.")
        location = location.strip()
        if len(location) > LOCATION_MAX_LENGTH:
            raise ValidationError(f"Location must be at most {LOCATION_MAX_LENGTH} characters.")

        if FarmerService.farmer_record(farmer_id) is None:
            raise ValidationError("Farmer not found.")

        with equipment_locks.hold(equipment_id):
            try:
                equipment = BookingService._locked_equipment(equipment_id)
                if equipment is None or equipment.status != EQUIPMENT_AVAILABLE:
                    raise NotAvailable("Equipment not available.")

                booking = Booking(
                    equipment_id=equipment.id,
                    farmer_id=farmer_id,
                    start_date=start,
                    end_date=end,
                    location=location,
                    status=BOOKING_ACTIVE,
                    total_cost=calculate_cost(start, end, equipment.price_per_day),
                )
                db.session.add(booking)
                db.session.flush()

                flipped = db.session.execute(
                    update(Equipment)
                    .where(Equipment.id == equipment.id, Equipment.status == EQUIPMENT_AVAILABLE)
                    .values(status=EQUIPMENT_RENTED)
                )
                if flipped.rowcount != 1:
                    raise NotAvailable("Equipment not available.")
                db.session.commit()
            except NotAvailable:
                db.session.rollback()
                current_app.logger.warning("Booking rejected: equipment %s not available.", equipment_id)
                raise
            except SQLAlchemyError as exc:
                db.session.rollback()
                raise StorageError("Failed to create booking.") from exc

        current_app.logger.info(
            "Booking %s created for equipment %s by farmer %s (total %s).",
            booking.id,
            equipment_id,
            farmer_id,
            booking.total_cost,
        )
        return booking

    @staticmethod
    def cancel_booking(booking_id):
        return BookingService._close_booking(booking_id, BOOKING_CANCELLED)

    @staticmethod
    def complete_booking(booking_id):
        return BookingService._close_booking(booking_id, BOOKING_COMPLETED)

    @staticmethod
    def _close_booking(booking_id, new_status):
        booking = db.session.get(Booking, booking_id)
        if not booking:
            raise NotFound("Booking not found.")
        equipment_id = booking.equipment_id

        with equipment_locks.hold(equipment_id):
            try:
                db.session.refresh(booking, with_for_update=True)
                current = booking.status
                if current == new_status:
                    # Repeating a terminal transition changes nothing.
                    db.session.rollback()
                    return booking
                if new_status not in BOOKING_TRANSITIONS.get(current, set()):
                    raise InvalidTransition(f"Invalid status transition from {current} to {new_status}.")

                now = utcnow()
                booking.status = new_status
                if new_status == BOOKING_CANCELLED:
                    booking.cancelled_at = now
                else:
                    booking.completed_at = now
                db.session.flush()

                db.session.execute(
                    update(Equipment).where(Equipment.id == equipment_id).values(status=EQUIPMENT_AVAILABLE)
                )
                db.session.commit()
            except InvalidTransition:
                db.session.rollback()
                raise
            except SQLAlchemyError as exc:
                db.session.rollback()
                raise StorageError(f"Failed to mark booking as {new_status}.") from exc

        current_app.logger.info("Booking %s %s; equipment %s available.", booking.id, new_status, equipment_id)
        return booking

    @staticmethod
    def bookings_for_farmer(farmer_id):
        rows = (
            db.session.query(Booking, Equipment.name)
            .join(Equipment, Equipment.id == Booking.equipment_id)
            .filter(Booking.farmer_id == farmer_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )
        return [dict(booking.to_dict(), equipment_name=equipment_name) for booking, equipment_name in rows]

    @staticmethod
    def all_bookings():
        rows = (
            db.session.query(Booking, Equipment.name, Farmer.name)
            .join(Equipment, Equipment.id == Booking.equipment_id)
            .join(Farmer, Farmer.id == Booking.farmer_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )
        return [
            dict(booking.to_dict(), equipment_name=equipment_name, farmer_name=farmer_name)
            for booking, equipment_name, farmer_name in rows
        ]

    @staticmethod
    def ledger_violations():
        """Equipment ids whose status disagrees with their count of active bookings."""
        active_count = func.sum(case((Booking.status == BOOKING_ACTIVE, 1), else_=0))
        rows = (
            db.session.query(Equipment.id, Equipment.status, func.coalesce(active_count, 0))
            .outerjoin(Booking, Booking.equipment_id == Equipment.id)
            .group_by(Equipment.id, Equipment.status)
            .order_by(Equipment.id.asc())
            .all()
        )
        violations = []
        for equipment_id, status, active in rows:
            expected = 1 if status == EQUIPMENT_RENTED else 0
            if int(active) != expected:
                violations.append(equipment_id)
        return violations
