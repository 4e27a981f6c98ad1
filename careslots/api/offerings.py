from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from ..core.database import get_db
from ..core.exceptions import InvalidScheduleInput, MissingOfferingReference, ScheduleConflict, PersistenceFailure
from ..services import OfferingService, ScheduleService, TimeOffService
from ..schemas.offering import OfferingResponse
from ..schemas.schedule import (
    WeeklyScheduleSave, WeeklyScheduleResponse,
    ScheduleSaveResponse, ConflictCheckResponse
)
from ..schemas.time_off import TimeOffCreate, TimeOffResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/offerings", tags=["offerings"])


async def _get_offering_or_404(db: AsyncSession, offering_id: int):
    offering = await OfferingService(db).get_offering_by_id(offering_id)
    if not offering:
        raise HTTPException(status_code=404, detail=f"Offering {offering_id} not found")
    return offering


# Get an offering by ID
@router.get("/{offering_id}", response_model=OfferingResponse)
async def get_offering_by_id(
    offering_id: int,
    db: AsyncSession = Depends(get_db)
):
    try:
        return await _get_offering_or_404(db, offering_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load offering: {str(e)}")


# Weekly schedule of an offering
@router.get("/{offering_id}/schedule", response_model=List[WeeklyScheduleResponse])
async def get_weekly_schedule(
    offering_id: int,
    db: AsyncSession = Depends(get_db)
):
    try:
        await _get_offering_or_404(db, offering_id)
        schedule_service = ScheduleService(db)
        return await schedule_service.get_weekly_schedule(offering_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load schedule: {str(e)}")


# Replace the weekly schedule (409 on overlap with other offerings of the center)
@router.put("/{offering_id}/schedule", response_model=ScheduleSaveResponse)
async def save_weekly_schedule(
    offering_id: int,
    payload: WeeklyScheduleSave,
    db: AsyncSession = Depends(get_db)
):
    """Validate against sibling offerings and replace the stored schedule"""
    try:
        schedule_service = ScheduleService(db)
        rows = await schedule_service.save_weekly_schedule(offering_id, payload.schedule)
        return ScheduleSaveResponse(
            message=f"Successfully saved {len(rows)} schedule entries",
            entries_saved=len(rows)
        )
    except ScheduleConflict as e:
        raise HTTPException(status_code=409, detail={"error": "schedule_conflict", "message": e.message, "conflicts": e.conflicts})
    except InvalidScheduleInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceFailure as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error while saving schedule of offering {offering_id}")
        raise HTTPException(status_code=500, detail=f"Failed to save schedule: {str(e)}")


# Dry run of the conflict check
@router.post("/{offering_id}/schedule/check", response_model=ConflictCheckResponse)
async def check_schedule_conflicts(
    offering_id: int,
    payload: WeeklyScheduleSave,
    db: AsyncSession = Depends(get_db)
):
    try:
        offering = await _get_offering_or_404(db, offering_id)
        schedule_service = ScheduleService(db)
        report = await schedule_service.check_conflicts(offering.center_id, offering.id, payload.schedule)
        return ConflictCheckResponse.from_report(report)
    except HTTPException:
        raise
    except (InvalidScheduleInput, MissingOfferingReference) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to check schedule: {str(e)}")


# Remove one day from the weekly schedule
@router.delete("/{offering_id}/schedule/{day_of_week}")
async def delete_schedule_day(
    offering_id: int,
    day_of_week: int = Path(..., ge=0, le=6),
    db: AsyncSession = Depends(get_db)
):
    try:
        schedule_service = ScheduleService(db)
        await schedule_service.delete_day(offering_id, day_of_week)
        return {"message": "Schedule day removed"}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to remove schedule day: {str(e)}")


# Time off
@router.post("/{offering_id}/time-off", response_model=TimeOffResponse, status_code=201)
async def create_time_off(
    offering_id: int,
    time_off: TimeOffCreate,
    db: AsyncSession = Depends(get_db)
):
    try:
        time_off_service = TimeOffService(db)
        return await time_off_service.create_time_off(offering_id, time_off)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add time off: {str(e)}")


@router.get("/{offering_id}/time-off", response_model=List[TimeOffResponse])
async def get_offering_time_off(
    offering_id: int,
    db: AsyncSession = Depends(get_db)
):
    try:
        time_off_service = TimeOffService(db)
        return await time_off_service.get_offering_time_off(offering_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load time off: {str(e)}")


@router.delete("/{offering_id}/time-off/{time_off_id}")
async def delete_time_off(
    offering_id: int,
    time_off_id: int,
    db: AsyncSession = Depends(get_db)
):
    try:
        time_off_service = TimeOffService(db)
        time_off = await time_off_service.get_time_off_by_id(time_off_id)
        if not time_off or time_off.offering_id != offering_id:
            raise HTTPException(status_code=404, detail=f"Time off {time_off_id} not found")
        await time_off_service.delete_time_off(time_off_id)
        return {"message": "Time off removed"}
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to remove time off: {str(e)}")
