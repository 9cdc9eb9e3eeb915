"""Database models."""
from courtside.models.club import Club
from courtside.models.facility import Facility
from courtside.models.player import Player
from courtside.models.coach import Coach, CoachAvailabilityWindow, ClassSession
from courtside.models.accessory import Accessory
from courtside.models.reservation import (
    AccessoryOrder,
    AccessoryOrderKind,
    CoachBooking,
    CoachBookingKind,
    FacilityBooking,
    PayableType,
    RESERVATION_MODELS,
    ReservationStatus,
)
from courtside.models.payment import Payment

__all__ = [
    "Club",
    "Facility",
    "Player",
    "Coach",
    "CoachAvailabilityWindow",
    "ClassSession",
    "Accessory",
    "FacilityBooking",
    "CoachBooking",
    "CoachBookingKind",
    "AccessoryOrder",
    "AccessoryOrderKind",
    "PayableType",
    "ReservationStatus",
    "RESERVATION_MODELS",
    "Payment",
]
