from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class CenterBase(BaseModel):
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True


class CenterCreate(CenterBase):
    pass


class CenterResponse(CenterBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
