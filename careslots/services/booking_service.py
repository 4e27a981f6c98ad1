from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, and_
from typing import Optional, List, Set
from datetime import date
from ..core.exceptions import PersistenceFailure
from ..models.booking import Booking, ACTIVE_BOOKING_STATUSES, BOOKING_STATUSES
from ..models.offering import Offering
from ..schemas.booking import BookingCreate, BookingRescheduleRequest, BookingCancelRequest, BookingStatusUpdate
from .slot_engine import BookedSlot, normalize_time
import logging

logger = logging.getLogger(__name__)


class BookingService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_booking_by_id(self, booking_id: int) -> Optional[Booking]:
        try:
            result = await self.db.execute(
                select(Booking).where(Booking.id == booking_id)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to load booking {booking_id}: {e}")
            raise

    async def get_bookings(self, offering_id: int, booking_date: Optional[date] = None) -> List[Booking]:
        try:
            query = select(Booking).where(Booking.offering_id == offering_id)
            if booking_date is not None:
                query = query.where(Booking.booking_date == booking_date.isoformat())
            result = await self.db.execute(
                query.order_by(Booking.booking_date, Booking.booking_time)
            )
            return result.scalars().all()
        except Exception as e:
            logger.error(f"Failed to load bookings of offering {offering_id}: {e}")
            raise

    async def get_booked_slots(
        self,
        offering_id: int,
        start_date: date,
        end_date: Optional[date] = None,
    ) -> List[BookedSlot]:
        """Slots held by active bookings on one date, or on every date up to end_date"""
        return [
            BookedSlot(booking_id, normalize_time(time))
            for booking_id, _, time in await self._active_bookings(offering_id, start_date, end_date)
        ]

    async def get_booked_slots_by_date(self, offering_id: int, start_date: date, end_date: date) -> dict:
        booked = {}
        for booking_id, booking_date, time in await self._active_bookings(offering_id, start_date, end_date):
            booked.setdefault(booking_date, []).append(BookedSlot(booking_id, normalize_time(time)))
        return booked

    async def get_booked_times(self, offering_id: int, on_date: date) -> Set[str]:
        """Start times taken on a date"""
        return {slot.time for slot in await self.get_booked_slots(offering_id, on_date)}

    async def _active_bookings(self, offering_id: int, start_date: date, end_date: Optional[date]) -> list:
        try:
            if end_date is None:
                date_filter = Booking.booking_date == start_date.isoformat()
            else:
                date_filter = and_(
                    Booking.booking_date >= start_date.isoformat(),
                    Booking.booking_date <= end_date.isoformat()
                )
            result = await self.db.execute(
                select(Booking.id, Booking.booking_date, Booking.booking_time).where(
                    and_(
                        Booking.offering_id == offering_id,
                        date_filter,
                        Booking.status.in_(ACTIVE_BOOKING_STATUSES)
                    )
                )
            )
            return result.all()
        except Exception as e:
            logger.error(f"Failed to load booked slots of offering {offering_id}: {e}")
            raise

    async def create_booking(self, booking_data: BookingCreate) -> Booking:
        """Book a slot after checking it is still free"""
        from .availability_service import AvailabilityService

        try:
            result = await self.db.execute(
                select(Offering).where(Offering.id == booking_data.offering_id)
            )
            offering = result.scalar_one_or_none()
            if not offering:
                raise ValueError(f"Offering {booking_data.offering_id} not found")

            await AvailabilityService(self.db).ensure_bookable(
                offering, booking_data.booking_date, booking_data.booking_time
            )

            db_booking = Booking(
                offering_id=offering.id,
                patient_id=booking_data.patient_id,
                patient_name=booking_data.patient_name,
                phone=booking_data.phone,
                booking_date=booking_data.booking_date.isoformat(),
                booking_time=booking_data.booking_time,
                status="scheduled",
                notes=booking_data.notes,
            )
            self.db.add(db_booking)
            try:
                await self.db.commit()
            except IntegrityError as e:
                raise PersistenceFailure(
                    f"Slot {booking_data.booking_time} on {booking_data.booking_date} was booked by someone else"
                ) from e
            await self.db.refresh(db_booking)
            logger.info(f"Booking {db_booking.id} created for offering {offering.id} "
                        f"at {db_booking.booking_date} {db_booking.booking_time}")
            return db_booking
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create booking: {e}")
            raise

    async def reschedule_booking(self, booking_id: int, reschedule_data: BookingRescheduleRequest) -> Booking:
        """Move a booking to another slot; its current slot counts as free"""
        from .availability_service import AvailabilityService

        try:
            booking = await self.get_booking_by_id(booking_id)
            if not booking:
                raise ValueError(f"Booking {booking_id} not found")

            if booking.status not in ACTIVE_BOOKING_STATUSES:
                raise ValueError(f"Cannot reschedule a booking with status {booking.status}")

            result = await self.db.execute(
                select(Offering).where(Offering.id == booking.offering_id)
            )
            offering = result.scalar_one()

            await AvailabilityService(self.db).ensure_bookable(
                offering, reschedule_data.new_date, reschedule_data.new_time, exclude_booking_id=booking.id
            )

            booking.booking_date = reschedule_data.new_date.isoformat()
            booking.booking_time = reschedule_data.new_time
            if reschedule_data.reason:
                booking.notes = reschedule_data.reason
            try:
                await self.db.commit()
            except IntegrityError as e:
                raise PersistenceFailure(
                    f"Slot {reschedule_data.new_time} on {reschedule_data.new_date} was booked by someone else"
                ) from e
            await self.db.refresh(booking)
            logger.info(f"Booking {booking_id} moved to {booking.booking_date} {booking.booking_time}")
            return booking
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to reschedule booking {booking_id}: {e}")
            raise

    async def cancel_booking(self, booking_id: int, cancel_data: BookingCancelRequest) -> Booking:
        try:
            booking = await self.get_booking_by_id(booking_id)
            if not booking:
                raise ValueError(f"Booking {booking_id} not found")

            if booking.status not in ACTIVE_BOOKING_STATUSES:
                raise ValueError(f"Cannot cancel a booking with status {booking.status}")

            booking.status = "cancelled"
            booking.cancel_reason = cancel_data.reason
            await self.db.commit()
            await self.db.refresh(booking)
            logger.info(f"Booking {booking_id} cancelled")
            return booking
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to cancel booking {booking_id}: {e}")
            raise

    async def update_status(self, booking_id: int, status_data: BookingStatusUpdate) -> Booking:
        """Set any known status; a booking that becomes active again must still find its slot free"""
        from .availability_service import AvailabilityService

        try:
            if status_data.status not in BOOKING_STATUSES:
                raise ValueError(
                    f"Unknown booking status {status_data.status}. Expected one of: {', '.join(BOOKING_STATUSES)}"
                )

            booking = await self.get_booking_by_id(booking_id)
            if not booking:
                raise ValueError(f"Booking {booking_id} not found")

            if status_data.status in ACTIVE_BOOKING_STATUSES and booking.status not in ACTIVE_BOOKING_STATUSES:
                result = await self.db.execute(
                    select(Offering).where(Offering.id == booking.offering_id)
                )
                offering = result.scalar_one()
                await AvailabilityService(self.db).ensure_bookable(
                    offering, date.fromisoformat(booking.booking_date), booking.booking_time,
                    exclude_booking_id=booking.id
                )

            previous = booking.status
            booking.status = status_data.status
            if status_data.status == "cancelled" and status_data.reason:
                booking.cancel_reason = status_data.reason
            try:
                await self.db.commit()
            except IntegrityError as e:
                raise PersistenceFailure(
                    f"Slot {booking.booking_time} on {booking.booking_date} is held by another booking"
                ) from e
            await self.db.refresh(booking)
            logger.info(f"Booking {booking_id} status changed from {previous} to {booking.status}")
            return booking
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update status of booking {booking_id}: {e}")
            raise
