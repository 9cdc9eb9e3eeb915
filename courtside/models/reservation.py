"""Reservation models: facility bookings, coach bookings and accessory orders."""
import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    ForeignKey,
    Numeric,
    DateTime,
    Index,
)
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func
from courtside.core.database import Base


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    RETURNED = "returned"  # accessory rentals only


class PayableType(str, enum.Enum):
    FACILITY = "facility"
    COACH = "coach"
    ACCESSORY = "accessory"


class CoachBookingKind(str, enum.Enum):
    PERSONAL = "personal"
    CLASS = "class"


class AccessoryOrderKind(str, enum.Enum):
    RENT = "rent"
    BUY = "buy"


class ReservationMixin:
    """Columns shared by every reservable kind."""

    id = Column(Integer, primary_key=True, index=True)

    @declared_attr
    def player_id(cls):
        return Column(Integer, ForeignKey("players.id"), nullable=False, index=True)

    @declared_attr
    def club_id(cls):
        return Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)

    # Pricing block: base and discount keep full precision, total is rounded
    base_price = Column(Numeric(18, 6), nullable=False)
    discount = Column(Numeric(18, 6), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False)
    membership_applied = Column(Boolean, nullable=False, default=False)

    status = Column(String, nullable=False, default=ReservationStatus.PENDING.value, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def current_status(self) -> ReservationStatus:
        return ReservationStatus(self.status)


class FacilityBooking(ReservationMixin, Base):
    """A player's hold on a facility for a time interval."""

    __tablename__ = "facility_bookings"
    payable_type = PayableType.FACILITY

    facility_id = Column(Integer, ForeignKey("facilities.id"), nullable=False)
    sport = Column(String, nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)

    facility = relationship("Facility", back_populates="bookings")

    __table_args__ = (
        Index("ix_facility_bookings_facility_start", "facility_id", "start_time"),
    )


class CoachBooking(ReservationMixin, Base):
    """A personal session or a seat (or several) in a class."""

    __tablename__ = "coach_bookings"
    payable_type = PayableType.COACH

    coach_id = Column(Integer, ForeignKey("coaches.id"), nullable=False)
    kind = Column(String, nullable=False)  # personal, class
    class_session_id = Column(Integer, ForeignKey("class_sessions.id"), nullable=True)
    participants = Column(Integer, nullable=False, default=1)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_coach_bookings_coach_kind", "coach_id", "kind"),
    )


class AccessoryOrder(ReservationMixin, Base):
    """An accessory rental (time-bounded) or purchase."""

    __tablename__ = "accessory_orders"
    payable_type = PayableType.ACCESSORY

    accessory_id = Column(Integer, ForeignKey("accessories.id"), nullable=False, index=True)
    kind = Column(String, nullable=False)  # rent, buy
    qty = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    hours = Column(Numeric(10, 4), nullable=False, default=0)
    start_time = Column(DateTime(timezone=True), nullable=True)  # rent only
    end_time = Column(DateTime(timezone=True), nullable=True)    # rent only

    @property
    def returnable(self) -> bool:
        return self.kind == AccessoryOrderKind.RENT.value


RESERVATION_MODELS = {
    PayableType.FACILITY: FacilityBooking,
    PayableType.COACH: CoachBooking,
    PayableType.ACCESSORY: AccessoryOrder,
}
