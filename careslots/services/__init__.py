# Services
from .center_service import CenterService
from .offering_service import OfferingService
from .schedule_service import ScheduleService
from .booking_service import BookingService
from .time_off_service import TimeOffService
from .availability_service import AvailabilityService

__all__ = [
    "CenterService",
    "OfferingService",
    "ScheduleService",
    "BookingService",
    "TimeOffService",
    "AvailabilityService",
]
