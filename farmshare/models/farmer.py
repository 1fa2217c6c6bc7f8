from flask_login import UserMixin

from farmshare.extensions import db
from farmshare.models.base import PKType, TimestampMixin, isoformat_or_none


class Farmer(UserMixin, TimestampMixin, db.Model):
    __tablename__ = "farmers"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(10), nullable=False, unique=True, index=True)

    bookings = db.relationship("Booking", back_populates="farmer", lazy="dynamic")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "created_at": isoformat_or_none(self.created_at),
        }
