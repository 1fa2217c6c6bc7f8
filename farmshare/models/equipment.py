from farmshare.extensions import db
from farmshare.models.base import PKType, TimestampMixin

EQUIPMENT_AVAILABLE = "available"
EQUIPMENT_RENTED = "rented"
EQUIPMENT_STATUSES = (EQUIPMENT_AVAILABLE, EQUIPMENT_RENTED)


class Equipment(TimestampMixin, db.Model):
    __tablename__ = "equipment"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    name = db.Column(db.String(140), nullable=False, index=True)
    category = db.Column(db.String(40), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    price_per_day = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=EQUIPMENT_AVAILABLE, index=True)

    bookings = db.relationship("Booking", back_populates="equipment", lazy="dynamic")

    __table_args__ = (
        db.Index("ix_equipment_category_status", "category", "status"),
        db.CheckConstraint("price_per_day > 0", name="ck_equipment_price_positive"),
        db.CheckConstraint("status IN ('available', 'rented')", name="ck_equipment_status"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "price_per_day": float(self.price_per_day),
            "status": self.status,
        }
