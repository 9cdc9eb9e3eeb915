"""Accessory model."""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from courtside.core.database import Base


class Accessory(Base):
    """Equipment a club rents by the hour and/or sells outright."""

    __tablename__ = "accessories"

    id = Column(Integer, primary_key=True, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    sport = Column(String, nullable=False)
    name = Column(String, nullable=False)
    rent_enabled = Column(Boolean, default=True, nullable=False)
    rent_price_per_hour = Column(Numeric(10, 2), default=0, nullable=False)
    buy_enabled = Column(Boolean, default=True, nullable=False)
    buy_price = Column(Numeric(10, 2), default=0, nullable=False)
    stock = Column(Integer, default=0, nullable=False)  # total items in club inventory
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    club = relationship("Club", back_populates="accessories")
