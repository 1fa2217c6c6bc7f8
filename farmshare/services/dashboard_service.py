from decimal import Decimal

from farmshare.models.booking import BOOKING_ACTIVE, BOOKING_CANCELLED
from farmshare.services.pricing import CENTS


class DashboardService:
    @staticmethod
    def summarize(bookings):
        """Dashboard numbers for a list of booking dicts, recomputed on every call.

        Cancelled bookings count toward the booking total but not toward spend.
        """
        total_spent = Decimal("0")
        active = 0
        for booking in bookings:
            status = booking.get("status")
            if status == BOOKING_ACTIVE:
                active += 1
            if status != BOOKING_CANCELLED:
                total_spent += Decimal(str(booking.get("total_cost") or 0))
        return {
            "active_bookings": active,
            "total_bookings": len(bookings),
            "total_spent": float(total_spent.quantize(CENTS)),
        }
