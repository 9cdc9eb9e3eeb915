"""API schemas."""
from courtside.schemas.identity import Requester, Role
from courtside.schemas.reservation import (
    FacilityBookingCreate,
    PersonalCoachBookingCreate,
    ClassBookingCreate,
    AccessoryOrderCreate,
    FacilityBookingInDB,
    CoachBookingInDB,
    AccessoryOrderInDB,
    ReservationInDB,
    to_schema,
)
from courtside.schemas.payment import (
    PaymentRequest,
    PaymentInDB,
    PaymentResult,
)

__all__ = [
    "Requester",
    "Role",
    "FacilityBookingCreate",
    "PersonalCoachBookingCreate",
    "ClassBookingCreate",
    "AccessoryOrderCreate",
    "FacilityBookingInDB",
    "CoachBookingInDB",
    "AccessoryOrderInDB",
    "ReservationInDB",
    "to_schema",
    "PaymentRequest",
    "PaymentInDB",
    "PaymentResult",
]
