"""Facility model."""
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from courtside.core.database import Base


class Facility(Base):
    """A bookable court or pitch owned by a club, priced by the hour."""

    __tablename__ = "facilities"

    id = Column(Integer, primary_key=True, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    sport = Column(String, nullable=False)  # e.g., "tennis", "futsal"
    hourly_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    club = relationship("Club", back_populates="facilities")
    bookings = relationship("FacilityBooking", back_populates="facility")
