import re

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from farmshare.errors import NotFound, StorageError, ValidationError
from farmshare.extensions import cache, db
from farmshare.models import Farmer


class FarmerService:
    @staticmethod
    def _normalize_phone(phone):
        digits = "".join(ch for ch in str(phone or "") if ch.isdigit())
        if not re.fullmatch(r"\d{10}", digits):
            raise ValidationError("Phone number must be exactly 10 digits.")
        return digits

    @staticmethod
    def login_or_register(name, phone):
        """Return ``(farmer, created)`` for the phone number, creating the farmer on first sight."""
        normalized_name = str(name or "").strip()
        if not normalized_name or not str(phone or "").strip():
            raise ValidationError("Name and phone are required.")
        normalized_phone = FarmerService._normalize_phone(phone)

        farmer = Farmer.query.filter_by(phone=normalized_phone).first()
        if farmer:
            return farmer, False

        farmer = Farmer(name=normalized_name, phone=normalized_phone)
        try:
            db.session.add(farmer)
            db.session.commit()
        except IntegrityError:
            # Another request registered the same phone first.
            db.session.rollback()
            existing = Farmer.query.filter_by(phone=normalized_phone).first()
            if existing is None:
                raise StorageError("Failed to create farmer account.")
            return existing, False
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageError("Failed to create farmer account.") from exc

        current_app.logger.info("Registered farmer %s.", farmer.id)
        return farmer, True

    @staticmethod
    @cache.memoize()
    def farmer_record(farmer_id):
        """Farmer as a dict, or None. Farmers are never edited or deleted, so hits stay valid."""
        farmer = db.session.get(Farmer, farmer_id)
        return farmer.to_dict() if farmer else None

    @staticmethod
    def list_farmers():
        return Farmer.query.order_by(Farmer.id.asc()).all()

    @staticmethod
    def get_farmer(farmer_id):
        record = FarmerService.farmer_record(farmer_id)
        if record is None:
            raise NotFound("Farmer not found.")
        return record
