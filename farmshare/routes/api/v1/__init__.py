from flask import Blueprint

from farmshare.routes.api.v1.bookings import api_booking_bp
from farmshare.routes.api.v1.equipment import api_equipment_bp
from farmshare.routes.api.v1.farmers import api_farmer_bp

api_v1_bp = Blueprint("api_v1", __name__)
api_v1_bp.register_blueprint(api_farmer_bp, url_prefix="/farmers")
api_v1_bp.register_blueprint(api_equipment_bp, url_prefix="/equipment")
api_v1_bp.register_blueprint(api_booking_bp, url_prefix="/bookings")
