from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from ..core.database import Base


class TimeOff(Base):
    __tablename__ = "time_off"

    id = Column(Integer, primary_key=True, index=True)
    offering_id = Column(Integer, ForeignKey("offering.id"), nullable=False, index=True)
    start_date = Column(String, nullable=False)  # "YYYY-MM-DD", inclusive
    end_date = Column(String, nullable=False)
    reason = Column(String, nullable=True)

    offering = relationship("Offering", back_populates="time_off")
