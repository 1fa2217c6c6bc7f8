from farmshare.services.booking_service import BookingService
from farmshare.services.dashboard_service import DashboardService
from farmshare.services.equipment_service import EquipmentService
from farmshare.services.farmer_service import FarmerService

__all__ = [
    "BookingService",
    "DashboardService",
    "EquipmentService",
    "FarmerService",
]
