from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date, datetime

from .schedule import _check_time_format


class BookingBase(BaseModel):
    offering_id: int
    patient_id: str
    patient_name: Optional[str] = None
    phone: Optional[str] = None
    booking_date: date
    booking_time: str = Field(..., description="Slot start time, HH:MM")
    notes: Optional[str] = None

    @field_validator('booking_time')
    @classmethod
    def validate_time_format(cls, v):
        if not v:
            raise ValueError('booking_time is required')
        return _check_time_format(v)


class BookingCreate(BookingBase):
    pass


class BookingRescheduleRequest(BaseModel):
    new_date: date
    new_time: str
    reason: Optional[str] = None

    @field_validator('new_time')
    @classmethod
    def validate_time_format(cls, v):
        if not v:
            raise ValueError('new_time is required')
        return _check_time_format(v)


class BookingCancelRequest(BaseModel):
    reason: str


class BookingResponse(BookingBase):
    id: int
    status: str
    cancel_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BookingStatusUpdate(BaseModel):
    status: str = Field(..., description="pending, scheduled, confirmed, in_progress, completed, cancelled or no_show")
    reason: Optional[str] = None
