from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..core.database import Base


# Statuses that hold a slot
ACTIVE_BOOKING_STATUSES = ("pending", "scheduled", "confirmed", "in_progress")
BOOKING_STATUSES = ACTIVE_BOOKING_STATUSES + ("completed", "cancelled", "no_show")

_ACTIVE_STATUS_SQL = "status IN ('pending', 'scheduled', 'confirmed', 'in_progress')"


class Booking(Base):
    __tablename__ = "booking"
    __table_args__ = (
        Index(
            "uq_booking_active_slot",
            "offering_id", "booking_date", "booking_time",
            unique=True,
            postgresql_where=text(_ACTIVE_STATUS_SQL),
            sqlite_where=text(_ACTIVE_STATUS_SQL),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    offering_id = Column(Integer, ForeignKey("offering.id"), nullable=False, index=True)
    patient_id = Column(String, nullable=False)
    patient_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    booking_date = Column(String, nullable=False)  # "YYYY-MM-DD"
    booking_time = Column(String, nullable=False)  # "HH:MM"
    status = Column(String, default="scheduled")
    notes = Column(String, nullable=True)
    cancel_reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    offering = relationship("Offering", back_populates="bookings")
