"""Club model."""
from sqlalchemy import Column, Integer, String, Boolean, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from courtside.core.database import Base


class Club(Base):
    """Represents a club selling court time, coaching and accessories."""

    __tablename__ = "clubs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=True)
    timezone = Column(String, nullable=False, default="UTC")
    approved = Column(Boolean, default=False, nullable=False)
    commission_rate = Column(Numeric(4, 2), nullable=True)  # set on admin approval
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    facilities = relationship("Facility", back_populates="club", cascade="all, delete-orphan")
    coaches = relationship("Coach", back_populates="club", cascade="all, delete-orphan")
    accessories = relationship("Accessory", back_populates="club", cascade="all, delete-orphan")
