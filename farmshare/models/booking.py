from farmshare.extensions import db
from farmshare.models.base import PKType, TimestampMixin, isoformat_or_none

BOOKING_ACTIVE = "active"
BOOKING_CANCELLED = "cancelled"
BOOKING_COMPLETED = "completed"
BOOKING_STATUSES = (BOOKING_ACTIVE, BOOKING_CANCELLED, BOOKING_COMPLETED)
LOCATION_MAX_LENGTH = 255
# Wide enough for the largest daily rate over the full calendar range.
TOTAL_COST_PRECISION = 18


class Booking(TimestampMixin, db.Model):
    __tablename__ = "bookings"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    equipment_id = db.Column(PKType, db.ForeignKey("equipment.id"), nullable=False, index=True)
    farmer_id = db.Column(PKType, db.ForeignKey("farmers.id"), nullable=False, index=True)

    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    location = db.Column(db.String(LOCATION_MAX_LENGTH), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=BOOKING_ACTIVE, index=True)
    total_cost = db.Column(db.Numeric(TOTAL_COST_PRECISION, 2), nullable=False)

    cancelled_at = db.Column(db.DateTime(timezone=True), nullable=True)
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    equipment = db.relationship("Equipment", back_populates="bookings")
    farmer = db.relationship("Farmer", back_populates="bookings")

    __table_args__ = (
        db.Index("ix_bookings_farmer_status", "farmer_id", "status"),
        db.Index("ix_bookings_equipment_status", "equipment_id", "status"),
        db.CheckConstraint("end_date >= start_date", name="ck_booking_date_order"),
        db.CheckConstraint("total_cost > 0", name="ck_booking_cost_positive"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "equipment_id": self.equipment_id,
            "farmer_id": self.farmer_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "location": self.location,
            "status": self.status,
            "total_cost": float(self.total_cost),
            "created_at": isoformat_or_none(self.created_at),
        }
