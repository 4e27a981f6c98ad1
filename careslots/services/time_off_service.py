from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from typing import Optional, List
from datetime import date
from ..models.offering import Offering
from ..models.time_off import TimeOff
from ..schemas.time_off import TimeOffCreate
import logging

logger = logging.getLogger(__name__)


class TimeOffService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_time_off_by_id(self, time_off_id: int) -> Optional[TimeOff]:
        try:
            result = await self.db.execute(
                select(TimeOff).where(TimeOff.id == time_off_id)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to load time off {time_off_id}: {e}")
            raise

    async def get_offering_time_off(
        self,
        offering_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[TimeOff]:
        """Time off periods of an offering, optionally those touching [start_date, end_date]"""
        try:
            query = select(TimeOff).where(TimeOff.offering_id == offering_id)
            # ISO dates compare correctly as strings
            if start_date is not None:
                query = query.where(TimeOff.end_date >= start_date.isoformat())
            if end_date is not None:
                query = query.where(TimeOff.start_date <= end_date.isoformat())
            result = await self.db.execute(query.order_by(TimeOff.start_date))
            return result.scalars().all()
        except Exception as e:
            logger.error(f"Failed to load time off of offering {offering_id}: {e}")
            raise

    async def is_off(self, offering_id: int, on_date: date) -> bool:
        try:
            day = on_date.isoformat()
            result = await self.db.execute(
                select(TimeOff.id).where(
                    and_(
                        TimeOff.offering_id == offering_id,
                        TimeOff.start_date <= day,
                        TimeOff.end_date >= day
                    )
                ).limit(1)
            )
            return result.scalar_one_or_none() is not None
        except Exception as e:
            logger.error(f"Failed to check time off of offering {offering_id} on {on_date}: {e}")
            raise

    async def create_time_off(self, offering_id: int, time_off_data: TimeOffCreate) -> TimeOff:
        try:
            result = await self.db.execute(
                select(Offering.id).where(Offering.id == offering_id)
            )
            if result.scalar_one_or_none() is None:
                raise ValueError(f"Offering {offering_id} not found")

            db_time_off = TimeOff(
                offering_id=offering_id,
                start_date=time_off_data.start_date.isoformat(),
                end_date=time_off_data.end_date.isoformat(),
                reason=time_off_data.reason,
            )
            self.db.add(db_time_off)
            await self.db.commit()
            await self.db.refresh(db_time_off)
            logger.info(f"Time off {db_time_off.start_date}..{db_time_off.end_date} added for offering {offering_id}")
            return db_time_off
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to add time off for offering {offering_id}: {e}")
            raise

    async def delete_time_off(self, time_off_id: int) -> bool:
        try:
            time_off = await self.get_time_off_by_id(time_off_id)
            if not time_off:
                raise ValueError(f"Time off {time_off_id} not found")

            await self.db.delete(time_off)
            await self.db.commit()
            logger.info(f"Time off {time_off_id} removed")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove time off {time_off_id}: {e}")
            raise
