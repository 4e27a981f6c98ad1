from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List, Any
from datetime import date, timedelta
from ..core.config import settings
from ..core.exceptions import InvalidScheduleInput, MissingOfferingReference, SlotUnavailable
from ..models.offering import Offering
from .booking_service import BookingService
from .offering_service import OfferingService
from .schedule_service import ScheduleService
from .time_off_service import TimeOffService
from .slot_engine import DaySchedule, SlotAvailability, day_of_week_for, resolve_available_slots
import logging

logger = logging.getLogger(__name__)

MAX_DATE_RANGE_DAYS = 366


class AvailabilityService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_offering_at_center(self, center_id: Optional[int], offering_id: Optional[int]) -> Offering:
        if center_id is None or offering_id is None:
            raise MissingOfferingReference("center_id and offering_id are required")

        offering = await OfferingService(self.db).get_offering_by_id(offering_id)
        if not offering or offering.center_id != center_id:
            raise MissingOfferingReference(f"Offering {offering_id} is not offered at center {center_id}")
        return offering

    async def get_available_slots(
        self,
        center_id: Optional[int],
        offering_id: Optional[int],
        on_date: Optional[date],
        exclude_booking_id: Any = None,
    ) -> List[SlotAvailability]:
        """Every slot of the offering on a date, tagged available or taken"""
        if on_date is None:
            raise MissingOfferingReference("date is required")
        offering = await self._get_offering_at_center(center_id, offering_id)

        if await TimeOffService(self.db).is_off(offering.id, on_date):
            logger.info(f"Offering {offering.id} is off on {on_date}")
            return []

        row = await ScheduleService(self.db).get_day_schedule(offering.id, day_of_week_for(on_date))
        if not row:
            return []

        booked = await BookingService(self.db).get_booked_slots(offering.id, on_date)
        slots = resolve_available_slots(DaySchedule.from_row(row), on_date, booked, exclude_booking_id)
        logger.debug(f"Offering {offering.id} on {on_date}: "
                     f"{sum(s.is_available for s in slots)} of {len(slots)} slots free")
        return slots

    async def get_available_dates(
        self,
        center_id: Optional[int],
        offering_id: Optional[int],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[dict]:
        """Dates in a range that still have at least one free slot"""
        offering = await self._get_offering_at_center(center_id, offering_id)

        start_date = start_date or date.today()
        end_date = end_date or start_date + timedelta(days=settings.available_dates_window_days)
        if end_date < start_date:
            raise InvalidScheduleInput("end_date must not be earlier than start_date")
        if (end_date - start_date).days > MAX_DATE_RANGE_DAYS:
            raise InvalidScheduleInput(f"Date range cannot exceed {MAX_DATE_RANGE_DAYS} days")

        schedule = {
            row.day_of_week: DaySchedule.from_row(row)
            for row in await ScheduleService(self.db).get_weekly_schedule(offering.id)
        }
        if not any(day.is_available for day in schedule.values()):
            return []

        time_off = await TimeOffService(self.db).get_offering_time_off(offering.id, start_date, end_date)
        booked = await BookingService(self.db).get_booked_slots_by_date(offering.id, start_date, end_date)

        available_dates = []
        current = start_date
        while current <= end_date:
            day = current.isoformat()
            entry = schedule.get(day_of_week_for(current))
            is_off = any(period.start_date <= day <= period.end_date for period in time_off)
            if entry and not is_off:
                slots = resolve_available_slots(entry, current, booked.get(day, []))
                free = sum(1 for slot in slots if slot.is_available)
                if free:
                    available_dates.append({
                        "date": current,
                        "day_of_week": entry.day_of_week,
                        "available_slots": free,
                    })
            current += timedelta(days=1)
        return available_dates

    async def ensure_bookable(
        self,
        offering: Offering,
        on_date: date,
        time: str,
        exclude_booking_id: Any = None,
    ) -> None:
        """Raise SlotUnavailable unless ``time`` is a free slot on ``on_date``"""
        slots = await self.get_available_slots(offering.center_id, offering.id, on_date, exclude_booking_id)
        slot = next((s for s in slots if s.time == time), None)
        if slot is None:
            raise SlotUnavailable(f"{time} on {on_date.isoformat()} is not a bookable slot")
        if not slot.is_available:
            raise SlotUnavailable(f"{time} on {on_date.isoformat()} is not available")
