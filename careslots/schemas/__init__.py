from .center import CenterCreate, CenterResponse
from .offering import OfferingCreate, OfferingResponse
from .schedule import (
    WeeklyScheduleEntry, WeeklyScheduleSave, WeeklyScheduleResponse,
    ScheduleSaveResponse, ConflictCheckResponse, DayCheckResponse
)
from .availability import SlotAvailabilityResponse, AvailableDateResponse
from .booking import (
    BookingCreate, BookingResponse, BookingRescheduleRequest,
    BookingCancelRequest, BookingStatusUpdate
)
from .time_off import TimeOffCreate, TimeOffResponse

__all__ = [
    "CenterCreate", "CenterResponse",
    "OfferingCreate", "OfferingResponse",
    "WeeklyScheduleEntry", "WeeklyScheduleSave", "WeeklyScheduleResponse",
    "ScheduleSaveResponse", "ConflictCheckResponse", "DayCheckResponse",
    "SlotAvailabilityResponse", "AvailableDateResponse",
    "BookingCreate", "BookingResponse", "BookingRescheduleRequest", "BookingCancelRequest", "BookingStatusUpdate",
    "TimeOffCreate", "TimeOffResponse"
]
