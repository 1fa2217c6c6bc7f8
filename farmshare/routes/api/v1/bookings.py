from flask import Blueprint, jsonify, request

from farmshare.services import BookingService, DashboardService

api_booking_bp = Blueprint("api_booking", __name__)


@api_booking_bp.post("")
def create_booking():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    booking = BookingService.create_booking(
        equipment_id=payload.get("equipment_id"),
        farmer_id=payload.get("farmer_id"),
        start_date=payload.get("start_date"),
        end_date=payload.get("end_date"),
        location=payload.get("location"),
    )
    return (
        jsonify(
            {
                "id": booking.id,
                "message": "Booking created successfully",
                "total_cost": float(booking.total_cost),
            }
        ),
        201,
    )


@api_booking_bp.get("")
def list_bookings():
    return jsonify(BookingService.all_bookings())


@api_booking_bp.get("/farmer/<int:farmer_id>")
def farmer_bookings(farmer_id):
    return jsonify(BookingService.bookings_for_farmer(farmer_id))


@api_booking_bp.get("/farmer/<int:farmer_id>/summary")
def farmer_summary(farmer_id):
    return jsonify(DashboardService.summarize(BookingService.bookings_for_farmer(farmer_id)))


@api_booking_bp.put("/<int:booking_id>/cancel")
def cancel_booking(booking_id):
    BookingService.cancel_booking(booking_id)
    return jsonify({"message": "Booking cancelled successfully"})


@api_booking_bp.put("/<int:booking_id>/complete")
def complete_booking(booking_id):
    BookingService.complete_booking(booking_id)
    return jsonify({"message": "Booking completed successfully"})
