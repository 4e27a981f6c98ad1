from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from ..core.database import Base


class WeeklySchedule(Base):
    __tablename__ = "weekly_schedule"
    __table_args__ = (
        UniqueConstraint("offering_id", "day_of_week", name="uq_weekly_schedule_offering_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    offering_id = Column(Integer, ForeignKey("offering.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0-6 (Sunday-Saturday)
    is_available = Column(Boolean, default=True)

    start_time = Column(String, nullable=True)  # "09:00"
    end_time = Column(String, nullable=True)    # "17:00"
    slot_duration = Column(Integer, default=30)

    break_start = Column(String, nullable=True)
    break_end = Column(String, nullable=True)
    notes = Column(String, nullable=True)

    offering = relationship("Offering", back_populates="schedule")
