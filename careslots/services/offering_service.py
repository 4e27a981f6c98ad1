from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional, List
from ..models.offering import Offering
from ..models.center import Center
from ..schemas.offering import OfferingCreate
import logging

logger = logging.getLogger(__name__)


class OfferingService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_offering_by_id(self, offering_id: int) -> Optional[Offering]:
        try:
            result = await self.db.execute(
                select(Offering).where(Offering.id == offering_id)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to load offering {offering_id}: {e}")
            raise

    async def get_center_offerings(self, center_id: int) -> List[Offering]:
        try:
            result = await self.db.execute(
                select(Offering).where(Offering.center_id == center_id).order_by(Offering.id)
            )
            return result.scalars().all()
        except Exception as e:
            logger.error(f"Failed to load offerings of center {center_id}: {e}")
            raise

    async def create_offering(self, center_id: int, offering_data: OfferingCreate) -> Offering:
        try:
            result = await self.db.execute(
                select(Center.id).where(Center.id == center_id)
            )
            if result.scalar_one_or_none() is None:
                raise ValueError(f"Center {center_id} not found")

            db_offering = Offering(center_id=center_id, **offering_data.model_dump())
            self.db.add(db_offering)
            await self.db.commit()
            await self.db.refresh(db_offering)
            logger.info(f"Offering {db_offering.id} ({db_offering.kind}) created at center {center_id}")
            return db_offering
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create offering at center {center_id}: {e}")
            raise
