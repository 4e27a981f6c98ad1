from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional, List
from ..models.center import Center
from ..schemas.center import CenterCreate
import logging

logger = logging.getLogger(__name__)


class CenterService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_center_by_id(self, center_id: int) -> Optional[Center]:
        try:
            result = await self.db.execute(
                select(Center).where(Center.id == center_id)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to load center {center_id}: {e}")
            raise

    async def get_centers(self, active_only: bool = False) -> List[Center]:
        try:
            query = select(Center).order_by(Center.id)
            if active_only:
                query = query.where(Center.is_active.is_(True))
            result = await self.db.execute(query)
            return result.scalars().all()
        except Exception as e:
            logger.error(f"Failed to load centers: {e}")
            raise

    async def create_center(self, center_data: CenterCreate) -> Center:
        try:
            db_center = Center(**center_data.model_dump())
            self.db.add(db_center)
            await self.db.commit()
            await self.db.refresh(db_center)
            logger.info(f"Center {db_center.id} created")
            return db_center
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create center: {e}")
            raise
