from pydantic import BaseModel
from datetime import date


class SlotAvailabilityResponse(BaseModel):
    time: str
    is_available: bool


class AvailableDateResponse(BaseModel):
    date: date
    day_of_week: int
    available_slots: int
