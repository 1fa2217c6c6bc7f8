from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from farmshare.errors import NotFound, StorageError, ValidationError
from farmshare.extensions import db
from farmshare.models import Equipment
from farmshare.models.equipment import EQUIPMENT_AVAILABLE, EQUIPMENT_STATUSES
from farmshare.seed import SAMPLE_EQUIPMENT
from farmshare.services.pricing import parse_price


class EquipmentService:
    @staticmethod
    def list_equipment(category=None, status=None):
        category = (category or "").strip() or None
        status = (status or "").strip().lower() or None
        if status and status not in EQUIPMENT_STATUSES:
            raise ValidationError("Invalid equipment status.")

        query = Equipment.query.order_by(Equipment.id.asc())
        if category:
            query = query.filter_by(category=category)
        if status:
            query = query.filter_by(status=status)
        return [item.to_dict() for item in query.all()]

    @staticmethod
    def get_equipment(equipment_id):
        equipment = db.session.get(Equipment, equipment_id)
        if not equipment:
            raise NotFound("Equipment not found.")
        return equipment

    @staticmethod
    def add_equipment(payload):
        name = (payload.get("name") or "").strip()
        category = (payload.get("category") or "").strip()
        price_per_day = payload.get("price_per_day")
        if not name or not category or price_per_day in (None, ""):
            raise ValidationError("Name, category, and price are required.")

        equipment = Equipment(
            name=name,
            category=category,
            description=(payload.get("description") or "").strip() or None,
            price_per_day=parse_price(price_per_day),
            status=EQUIPMENT_AVAILABLE,
        )
        try:
            db.session.add(equipment)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageError("Failed to add equipment.") from exc
        current_app.logger.info("Equipment %s added to catalog (%s).", equipment.id, equipment.category)
        return equipment

    @staticmethod
    def seed_sample_equipment():
        if Equipment.query.first() is not None:
            return 0
        for item in SAMPLE_EQUIPMENT:
            db.session.add(Equipment(status=EQUIPMENT_AVAILABLE, **item))
        db.session.commit()
        return len(SAMPLE_EQUIPMENT)
