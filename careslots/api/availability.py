from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import date
from ..core.database import get_db
from ..core.exceptions import InvalidScheduleInput, MissingOfferingReference
from ..services import AvailabilityService
from ..schemas.availability import SlotAvailabilityResponse, AvailableDateResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability", tags=["availability"])


# Slots of an offering on a date; booked and break slots come back with is_available=false
@router.get("/slots", response_model=List[SlotAvailabilityResponse])
async def get_available_slots(
    center_id: Optional[int] = Query(None, description="Center ID"),
    offering_id: Optional[int] = Query(None, description="Doctor or lab test offering ID"),
    date: Optional[date] = Query(None, description="Date in YYYY-MM-DD format"),
    exclude_booking_id: Optional[int] = Query(None, description="Booking being rescheduled"),
    db: AsyncSession = Depends(get_db)
):
    try:
        availability_service = AvailabilityService(db)
        slots = await availability_service.get_available_slots(center_id, offering_id, date, exclude_booking_id)
        return [SlotAvailabilityResponse(time=slot.time, is_available=slot.is_available) for slot in slots]
    except MissingOfferingReference as e:
        raise HTTPException(status_code=400, detail={"error": "missing_offering_reference", "message": str(e)})
    except InvalidScheduleInput as e:
        raise HTTPException(status_code=400, detail={"error": "invalid_schedule", "message": str(e)})
    except Exception as e:
        logger.exception(f"Failed to resolve slots for offering {offering_id} on {date}")
        raise HTTPException(status_code=500, detail=f"Failed to load available slots: {str(e)}")


# Bookable dates in a range (defaults to the next 30 days)
@router.get("/dates", response_model=List[AvailableDateResponse])
async def get_available_dates(
    center_id: Optional[int] = Query(None, description="Center ID"),
    offering_id: Optional[int] = Query(None, description="Doctor or lab test offering ID"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    try:
        availability_service = AvailabilityService(db)
        return await availability_service.get_available_dates(center_id, offering_id, start_date, end_date)
    except MissingOfferingReference as e:
        raise HTTPException(status_code=400, detail={"error": "missing_offering_reference", "message": str(e)})
    except InvalidScheduleInput as e:
        raise HTTPException(status_code=400, detail={"error": "invalid_schedule", "message": str(e)})
    except Exception as e:
        logger.exception(f"Failed to resolve dates for offering {offering_id}")
        raise HTTPException(status_code=500, detail=f"Failed to load available dates: {str(e)}")
