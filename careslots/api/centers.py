from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from ..core.database import get_db
from ..services import CenterService, OfferingService
from ..schemas.center import CenterCreate, CenterResponse
from ..schemas.offering import OfferingCreate, OfferingResponse

router = APIRouter(prefix="/centers", tags=["centers"])


#Create a center
@router.post("/", response_model=CenterResponse, status_code=201)
async def create_center(
    center: CenterCreate,
    db: AsyncSession = Depends(get_db)
):
    try:
        center_service = CenterService(db)
        return await center_service.create_center(center)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create center: {str(e)}")


#List centers
@router.get("/", response_model=List[CenterResponse])
async def get_centers(
    active_only: bool = False,
    db: AsyncSession = Depends(get_db)
):
    try:
        center_service = CenterService(db)
        return await center_service.get_centers(active_only)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load centers: {str(e)}")


#Get a center by ID
@router.get("/{center_id}", response_model=CenterResponse)
async def get_center_by_id(
    center_id: int,
    db: AsyncSession = Depends(get_db)
):
    try:
        center_service = CenterService(db)
        center = await center_service.get_center_by_id(center_id)
        if not center:
            raise HTTPException(status_code=404, detail=f"Center {center_id} not found")
        return center
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load center: {str(e)}")


#Add a doctor or lab test to a center
@router.post("/{center_id}/offerings", response_model=OfferingResponse, status_code=201)
async def create_offering(
    center_id: int,
    offering: OfferingCreate,
    db: AsyncSession = Depends(get_db)
):
    try:
        offering_service = OfferingService(db)
        return await offering_service.create_offering(center_id, offering)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create offering: {str(e)}")


#Offerings of a center
@router.get("/{center_id}/offerings", response_model=List[OfferingResponse])
async def get_center_offerings(
    center_id: int,
    db: AsyncSession = Depends(get_db)
):
    try:
        offering_service = OfferingService(db)
        return await offering_service.get_center_offerings(center_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load offerings: {str(e)}")
