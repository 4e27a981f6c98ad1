from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..core.database import Base


OFFERING_KINDS = ("doctor", "lab_test")


class Offering(Base):
    __tablename__ = "offering"

    id = Column(Integer, primary_key=True, index=True)
    center_id = Column(Integer, ForeignKey("center.id"), nullable=False, index=True)
    kind = Column(String, nullable=False)  # one of OFFERING_KINDS
    name = Column(String, nullable=False)
    # doctor id or lab test type id in the external directory
    reference_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    center = relationship("Center", back_populates="offerings")
    schedule = relationship("WeeklySchedule", back_populates="offering", order_by="WeeklySchedule.day_of_week")
    bookings = relationship("Booking", back_populates="offering")
    time_off = relationship("TimeOff", back_populates="offering")
