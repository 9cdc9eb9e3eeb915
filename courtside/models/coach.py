"""Coach, weekly availability and class session models."""
from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    ForeignKey,
    Numeric,
    DateTime,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from courtside.core.database import Base


class Coach(Base):
    """A coach offering personal sessions and/or group classes at a club."""

    __tablename__ = "coaches"

    id = Column(Integer, primary_key=True, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    sport = Column(String, nullable=False)
    personal_enabled = Column(Boolean, default=True, nullable=False)
    personal_rate_per_hour = Column(Numeric(10, 2), default=0, nullable=False)
    class_enabled = Column(Boolean, default=True, nullable=False)
    class_price = Column(Numeric(10, 2), default=0, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    club = relationship("Club", back_populates="coaches")
    availability_windows = relationship(
        "CoachAvailabilityWindow",
        back_populates="coach",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    class_sessions = relationship("ClassSession", back_populates="coach", cascade="all, delete-orphan")


class CoachAvailabilityWindow(Base):
    """Weekly recurring window in which personal sessions may be booked."""

    __tablename__ = "coach_availability_windows"

    id = Column(Integer, primary_key=True, index=True)
    coach_id = Column(Integer, ForeignKey("coaches.id", ondelete="CASCADE"), nullable=False, index=True)
    day = Column(Integer, nullable=False)           # 0=Sunday ... 6=Saturday
    start_minute = Column(Integer, nullable=False)  # 0..1439
    end_minute = Column(Integer, nullable=False)    # 1..1440

    coach = relationship("Coach", back_populates="availability_windows")

    __table_args__ = (
        CheckConstraint("day >= 0 AND day <= 6", name="ck_window_day"),
        CheckConstraint(
            "start_minute >= 0 AND start_minute < end_minute AND end_minute <= 1440",
            name="ck_window_minutes",
        ),
    )


class ClassSession(Base):
    """A scheduled group class with a fixed number of seats."""

    __tablename__ = "class_sessions"

    id = Column(Integer, primary_key=True, index=True)
    coach_id = Column(Integer, ForeignKey("coaches.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    max_capacity = Column(Integer, nullable=False)
    booked_count = Column(Integer, default=0, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    coach = relationship("Coach", back_populates="class_sessions")

    __table_args__ = (
        CheckConstraint("max_capacity >= 1", name="ck_session_capacity"),
        CheckConstraint(
            "booked_count >= 0 AND booked_count <= max_capacity",
            name="ck_session_booked_count",
        ),
    )
