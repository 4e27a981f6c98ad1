from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from ..models.offering import OFFERING_KINDS


class OfferingBase(BaseModel):
    kind: str = Field(..., description="doctor or lab_test")
    name: str = Field(..., min_length=1)
    reference_id: Optional[str] = Field(None, description="Doctor ID or lab test type ID")

    @field_validator('kind')
    @classmethod
    def validate_kind(cls, v):
        if v not in OFFERING_KINDS:
            raise ValueError(f"kind must be one of: {', '.join(OFFERING_KINDS)}")
        return v


class OfferingCreate(OfferingBase):
    pass


class OfferingResponse(OfferingBase):
    id: int
    center_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
