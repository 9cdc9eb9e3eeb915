"""Reservation schemas."""
from pydantic import BaseModel, ConfigDict
from typing import Optional, Union
from datetime import datetime
from decimal import Decimal

from courtside.models.reservation import AccessoryOrderKind, PayableType


class FacilityBookingCreate(BaseModel):
    """Schema for booking a facility."""

    facility_id: int
    start_time: datetime
    end_time: datetime


class PersonalCoachBookingCreate(BaseModel):
    """Schema for booking a personal coaching session."""

    coach_id: int
    start_time: datetime
    end_time: datetime


class ClassBookingCreate(BaseModel):
    """Schema for booking seats in a class session."""

    coach_id: int
    session_id: int
    participants: int = 1


class AccessoryOrderCreate(BaseModel):
    """Schema for renting or buying an accessory."""

    accessory_id: int
    kind: AccessoryOrderKind
    qty: int = 1
    start_time: Optional[datetime] = None  # rent only
    end_time: Optional[datetime] = None    # rent only


class ReservationBase(BaseModel):
    """Fields shared by every reservation kind."""

    id: int
    player_id: int
    club_id: int
    status: str
    base_price: Decimal
    discount: Decimal
    total: Decimal
    membership_applied: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class FacilityBookingInDB(ReservationBase):
    """Schema for a facility booking from database."""

    facility_id: int
    sport: str
    start_time: datetime
    end_time: datetime


class CoachBookingInDB(ReservationBase):
    """Schema for a coach booking from database."""

    coach_id: int
    kind: str
    class_session_id: Optional[int] = None
    participants: int
    start_time: datetime
    end_time: datetime


class AccessoryOrderInDB(ReservationBase):
    """Schema for an accessory order from database."""

    accessory_id: int
    kind: str
    qty: int
    unit_price: Decimal
    hours: Decimal
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


ReservationInDB = Union[FacilityBookingInDB, CoachBookingInDB, AccessoryOrderInDB]

RESERVATION_SCHEMAS = {
    PayableType.FACILITY: FacilityBookingInDB,
    PayableType.COACH: CoachBookingInDB,
    PayableType.ACCESSORY: AccessoryOrderInDB,
}


def to_schema(payable_type: PayableType, reservation) -> ReservationInDB:
    return RESERVATION_SCHEMAS[PayableType(payable_type)].model_validate(reservation)
