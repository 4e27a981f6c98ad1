from .center import Center
from .offering import Offering, OFFERING_KINDS
from .schedule import WeeklySchedule
from .booking import Booking, ACTIVE_BOOKING_STATUSES, BOOKING_STATUSES
from .time_off import TimeOff
from ..core.database import Base

__all__ = [
    "Base",
    "Center",
    "Offering",
    "OFFERING_KINDS",
    "WeeklySchedule",
    "Booking",
    "ACTIVE_BOOKING_STATUSES",
    "BOOKING_STATUSES",
    "TimeOff",
]
