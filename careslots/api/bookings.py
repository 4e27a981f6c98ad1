from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import date
from ..core.database import get_db
from ..core.exceptions import InvalidScheduleInput, MissingOfferingReference, SlotUnavailable, PersistenceFailure
from ..services import BookingService
from ..schemas.booking import (
    BookingCreate, BookingResponse,
    BookingRescheduleRequest, BookingCancelRequest, BookingStatusUpdate
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


#Create a booking
@router.post("/", response_model=BookingResponse, status_code=201)
async def create_booking(
    booking: BookingCreate,
    db: AsyncSession = Depends(get_db)
):
    try:
        booking_service = BookingService(db)
        return await booking_service.create_booking(booking)
    except (SlotUnavailable, PersistenceFailure) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (InvalidScheduleInput, MissingOfferingReference) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create booking: {str(e)}")


#Bookings of an offering, optionally on one date
@router.get("/", response_model=List[BookingResponse])
async def get_bookings(
    offering_id: int = Query(..., description="Offering ID"),
    booking_date: Optional[date] = Query(None, alias="date", description="Date in YYYY-MM-DD format"),
    db: AsyncSession = Depends(get_db)
):
    try:
        booking_service = BookingService(db)
        return await booking_service.get_bookings(offering_id, booking_date)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load bookings: {str(e)}")


#Get a booking by ID
@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking_by_id(
    booking_id: int,
    db: AsyncSession = Depends(get_db)
):
    try:
        booking_service = BookingService(db)
        booking = await booking_service.get_booking_by_id(booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load booking: {str(e)}")


#Reschedule a booking
@router.put("/{booking_id}/reschedule", response_model=BookingResponse)
async def reschedule_booking(
    booking_id: int,
    reschedule_data: BookingRescheduleRequest,
    db: AsyncSession = Depends(get_db)
):
    """Move a booking to another free slot of the same offering"""
    try:
        booking_service = BookingService(db)
        if not await booking_service.get_booking_by_id(booking_id):
            raise HTTPException(status_code=404, detail="Booking not found")
        return await booking_service.reschedule_booking(booking_id, reschedule_data)
    except HTTPException:
        raise
    except (SlotUnavailable, PersistenceFailure) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to reschedule booking: {str(e)}")


#Cancel a booking
@router.put("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    cancel_data: BookingCancelRequest,
    db: AsyncSession = Depends(get_db)
):
    """Cancel a booking and free its slot"""
    try:
        booking_service = BookingService(db)
        if not await booking_service.get_booking_by_id(booking_id):
            raise HTTPException(status_code=404, detail="Booking not found")
        return await booking_service.cancel_booking(booking_id, cancel_data)
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to cancel booking: {str(e)}")


#Change the status of a booking (confirmed, completed, no_show, ...)
@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    status_data: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Completed, cancelled and no_show bookings release their slot"""
    try:
        booking_service = BookingService(db)
        if not await booking_service.get_booking_by_id(booking_id):
            raise HTTPException(status_code=404, detail="Booking not found")
        return await booking_service.update_status(booking_id, status_data)
    except HTTPException:
        raise
    except (SlotUnavailable, PersistenceFailure) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update booking status: {str(e)}")
