from pydantic import BaseModel, ConfigDict, model_validator
from typing import Optional
from datetime import date


class TimeOffCreate(BaseModel):
    start_date: date
    end_date: date
    reason: Optional[str] = None

    @model_validator(mode='after')
    def validate_range(self):
        if self.end_date < self.start_date:
            raise ValueError('end_date must not be earlier than start_date')
        return self


class TimeOffResponse(BaseModel):
    id: int
    offering_id: int
    start_date: date
    end_date: date
    reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
