from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, delete, and_
from typing import Optional, List, Iterable
from ..core.config import settings
from ..core.exceptions import InvalidScheduleInput, MissingOfferingReference, ScheduleConflict, PersistenceFailure
from ..models.center import Center
from ..models.offering import Offering
from ..models.schedule import WeeklySchedule
from ..schemas.schedule import WeeklyScheduleEntry
from .slot_engine import (
    ConflictReport, DaySchedule, SiblingSchedule,
    check_schedule_conflicts, validate_day_schedule,
)
import logging

logger = logging.getLogger(__name__)


class ScheduleService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_weekly_schedule(self, offering_id: int) -> List[WeeklySchedule]:
        """Weekly schedule of an offering, ordered by day"""
        try:
            result = await self.db.execute(
                select(WeeklySchedule)
                .where(WeeklySchedule.offering_id == offering_id)
                .order_by(WeeklySchedule.day_of_week)
            )
            return result.scalars().all()
        except Exception as e:
            logger.error(f"Failed to load schedule of offering {offering_id}: {e}")
            raise

    async def get_day_schedule(self, offering_id: int, day_of_week: int) -> Optional[WeeklySchedule]:
        try:
            result = await self.db.execute(
                select(WeeklySchedule).where(
                    and_(
                        WeeklySchedule.offering_id == offering_id,
                        WeeklySchedule.day_of_week == day_of_week
                    )
                )
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to load day {day_of_week} of offering {offering_id}: {e}")
            raise

    async def get_sibling_schedules(
        self,
        center_id: int,
        day_of_week: Optional[int] = None,
        excluding_offering_id: Optional[int] = None,
    ) -> List[SiblingSchedule]:
        """Available schedule rows of the other offerings at a center"""
        try:
            query = (
                select(WeeklySchedule, Offering.name)
                .join(Offering, Offering.id == WeeklySchedule.offering_id)
                .where(
                    and_(
                        Offering.center_id == center_id,
                        WeeklySchedule.is_available.is_(True)
                    )
                )
            )
            if day_of_week is not None:
                query = query.where(WeeklySchedule.day_of_week == day_of_week)
            if excluding_offering_id is not None:
                query = query.where(WeeklySchedule.offering_id != excluding_offering_id)

            result = await self.db.execute(query)
            return [
                SiblingSchedule(row.offering_id, name, DaySchedule.from_row(row))
                for row, name in result.all()
            ]
        except Exception as e:
            logger.error(f"Failed to load sibling schedules at center {center_id}: {e}")
            raise

    def _validate_entries(self, entries: Iterable[WeeklyScheduleEntry]) -> List[DaySchedule]:
        days = []
        seen = set()
        for entry in entries:
            if entry.day_of_week in seen:
                raise InvalidScheduleInput(f"Day {entry.day_of_week} appears more than once")
            seen.add(entry.day_of_week)

            day = DaySchedule.from_row(entry)
            validate_day_schedule(day, settings.min_slot_duration, settings.max_slot_duration)
            days.append(day)
        return days

    async def check_conflicts(
        self,
        center_id: Optional[int],
        offering_id: Optional[int],
        proposed: Iterable[WeeklyScheduleEntry],
    ) -> ConflictReport:
        """Check a proposed weekly schedule against the other offerings of the center"""
        if center_id is None or offering_id is None:
            raise MissingOfferingReference("center_id and offering_id are required to check schedule conflicts")

        days = self._validate_entries(proposed)
        siblings = await self.get_sibling_schedules(center_id, excluding_offering_id=offering_id)
        report = check_schedule_conflicts(days, siblings)
        if not report.ok:
            logger.info(f"Offering {offering_id}: {len(report.conflicts)} schedule conflict(s) at center {center_id}")
        return report

    async def save_weekly_schedule(self, offering_id: int, entries: List[WeeklyScheduleEntry]) -> List[WeeklySchedule]:
        """Replace the weekly schedule of an offering.

        Nothing is written when any day conflicts with another offering at the
        same center.
        """
        try:
            result = await self.db.execute(
                select(Offering).where(Offering.id == offering_id)
            )
            offering = result.scalar_one_or_none()
            if not offering:
                raise ValueError(f"Offering {offering_id} not found")

            # Saves at one center are serialized on the center row
            await self.db.execute(
                select(Center.id).where(Center.id == offering.center_id).with_for_update()
            )

            report = await self.check_conflicts(offering.center_id, offering_id, entries)
            if not report.ok:
                raise ScheduleConflict(report.conflicts)

            await self.db.execute(
                delete(WeeklySchedule).where(WeeklySchedule.offering_id == offering_id)
            )
            rows = [
                WeeklySchedule(
                    offering_id=offering_id,
                    day_of_week=entry.day_of_week,
                    is_available=entry.is_available,
                    start_time=entry.start_time,
                    end_time=entry.end_time,
                    slot_duration=entry.slot_duration,
                    break_start=entry.break_start,
                    break_end=entry.break_end,
                    notes=entry.notes,
                )
                for entry in sorted(entries, key=lambda e: e.day_of_week)
            ]
            self.db.add_all(rows)
            try:
                await self.db.commit()
            except SQLAlchemyError as e:
                raise PersistenceFailure(f"Failed to save schedule of offering {offering_id}: {e}") from e

            for row in rows:
                await self.db.refresh(row)
            logger.info(f"Saved {len(rows)} schedule entries for offering {offering_id}")
            return rows

        except ScheduleConflict:
            await self.db.rollback()
            logger.warning(f"Schedule of offering {offering_id} rejected because of conflicts")
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to save schedule of offering {offering_id}: {e}")
            raise

    async def delete_day(self, offering_id: int, day_of_week: int) -> bool:
        try:
            row = await self.get_day_schedule(offering_id, day_of_week)
            if not row:
                raise ValueError(f"Offering {offering_id} has no schedule for day {day_of_week}")

            await self.db.delete(row)
            await self.db.commit()
            logger.info(f"Day {day_of_week} removed from schedule of offering {offering_id}")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove day {day_of_week} of offering {offering_id}: {e}")
            raise
