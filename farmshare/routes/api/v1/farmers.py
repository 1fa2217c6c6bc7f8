from flask import Blueprint, current_app, jsonify, request
from flask_login import login_user

from farmshare.extensions import limiter
from farmshare.services import FarmerService

api_farmer_bp = Blueprint("api_farmer", __name__)


@api_farmer_bp.post("/login")
@limiter.limit(lambda: current_app.config["LOGIN_RATE_LIMIT"])
def login():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    farmer, created = FarmerService.login_or_register(payload.get("name"), payload.get("phone"))
    login_user(farmer)
    if created:
        return jsonify({"farmer": farmer.to_dict(), "message": "Account created successfully"}), 201
    return jsonify({"farmer": farmer.to_dict(), "message": "Login successful"})


@api_farmer_bp.get("")
def list_farmers():
    return jsonify([farmer.to_dict() for farmer in FarmerService.list_farmers()])


@api_farmer_bp.get("/<int:farmer_id>")
def get_farmer(farmer_id):
    return jsonify(FarmerService.get_farmer(farmer_id))
