from flask import Blueprint, jsonify, request

from farmshare.services import EquipmentService

api_equipment_bp = Blueprint("api_equipment", __name__)


@api_equipment_bp.get("")
def list_equipment():
    items = EquipmentService.list_equipment(
        category=request.args.get("category"),
        status=request.args.get("status"),
    )
    return jsonify(items)


@api_equipment_bp.get("/<int:equipment_id>")
def get_equipment(equipment_id):
    return jsonify(EquipmentService.get_equipment(equipment_id).to_dict())


@api_equipment_bp.post("")
def add_equipment():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    equipment = EquipmentService.add_equipment(payload)
    return jsonify({"id": equipment.id, "message": "Equipment added successfully"}), 201
