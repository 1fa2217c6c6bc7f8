from farmshare.models.booking import Booking
from farmshare.models.equipment import Equipment
from farmshare.models.farmer import Farmer

__all__ = [
    "Farmer",
    "Equipment",
    "Booking",
]
