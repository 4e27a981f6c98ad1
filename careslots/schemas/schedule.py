from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


def _check_time_format(v: Optional[str]) -> Optional[str]:
    if not v:
        return None
    try:
        hours, minutes = map(int, v.split(':'))
        if not (0 <= hours <= 23 and 0 <= minutes <= 59):
            raise ValueError
    except ValueError:
        raise ValueError('Time must be in HH:MM format (for example: 09:00)')
    return f"{hours:02d}:{minutes:02d}"


class WeeklyScheduleEntry(BaseModel):
    """One day of an offering's recurring weekly schedule"""
    day_of_week: int = Field(..., ge=0, le=6, description="0-Sunday .. 6-Saturday")
    is_available: bool = True
    start_time: Optional[str] = Field(None, description="Start of the working day (for example: 09:00)")
    end_time: Optional[str] = Field(None, description="End of the working day (for example: 17:00)")
    slot_duration: int = Field(30, description="Slot length in minutes")
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('start_time', 'end_time', 'break_start', 'break_end')
    @classmethod
    def validate_time_format(cls, v):
        """Accepts HH:MM, normalizes to zero-padded form"""
        return _check_time_format(v)


class WeeklyScheduleSave(BaseModel):
    """Full weekly schedule of one offering, replaces what is stored"""
    schedule: List[WeeklyScheduleEntry]


class WeeklyScheduleResponse(WeeklyScheduleEntry):
    id: int
    offering_id: int

    model_config = ConfigDict(from_attributes=True)


class ScheduleSaveResponse(BaseModel):
    message: str
    entries_saved: int


class DayCheckResponse(BaseModel):
    day_of_week: int
    day_name: str
    ok: bool
    conflicts: List[str]


class ConflictCheckResponse(BaseModel):
    ok: bool
    conflicts: List[str]
    days: List[DayCheckResponse]

    @classmethod
    def from_report(cls, report) -> "ConflictCheckResponse":
        return cls(
            ok=report.ok,
            conflicts=report.conflicts,
            days=[
                DayCheckResponse(
                    day_of_week=day.day_of_week,
                    day_name=day.day_name,
                    ok=day.ok,
                    conflicts=day.conflicts,
                )
                for day in report.days
            ],
        )
