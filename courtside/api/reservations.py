"""Reservation endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.api.deps import get_requester
from courtside.core.database import get_db
from courtside.models.reservation import PayableType
from courtside.schemas.identity import Requester
from courtside.schemas.reservation import (
    AccessoryOrderCreate,
    AccessoryOrderInDB,
    ClassBookingCreate,
    CoachBookingInDB,
    FacilityBookingCreate,
    FacilityBookingInDB,
    PersonalCoachBookingCreate,
    ReservationInDB,
    to_schema,
)
from courtside.services.reservation_service import reservation_service

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.post("/facility", response_model=FacilityBookingInDB, status_code=201)
async def book_facility(
    body: FacilityBookingCreate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a facility for a time interval.

    Rejected with SLOT_TAKEN (409) when any live booking on the facility
    overlaps the requested interval, and with INVALID_DURATION (400) outside
    0-8 hours. Members get the membership discount.
    """
    return await reservation_service.create_facility_booking(
        db, requester, body.facility_id, body.start_time, body.end_time
    )


@router.post("/coach/personal", response_model=CoachBookingInDB, status_code=201)
async def book_personal_coach(
    body: PersonalCoachBookingCreate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Book a one-to-one session inside the coach's weekly availability."""
    return await reservation_service.create_personal_coach_booking(
        db, requester, body.coach_id, body.start_time, body.end_time
    )


@router.post("/coach/class", response_model=CoachBookingInDB, status_code=201)
async def book_class(
    body: ClassBookingCreate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Book seats in a class session; CAPACITY_EXCEEDED when it is full."""
    return await reservation_service.create_class_booking(
        db, requester, body.coach_id, body.session_id, body.participants
    )


@router.post("/accessory", response_model=AccessoryOrderInDB, status_code=201)
async def order_accessory(
    body: AccessoryOrderCreate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Rent (with start/end time) or buy an accessory."""
    return await reservation_service.create_accessory_order(
        db,
        requester,
        body.accessory_id,
        body.kind,
        body.qty,
        body.start_time,
        body.end_time,
    )


@router.post("/accessory/{order_id}/return", response_model=AccessoryOrderInDB)
async def return_accessory(
    order_id: int,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """Mark a paid rental as returned (club managers only)."""
    return await reservation_service.mark_returned(db, requester, order_id)


@router.post("/{payable_type}/{reservation_id}/cancel", response_model=ReservationInDB)
async def cancel_reservation(
    payable_type: PayableType,
    reservation_id: int,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """
    Cancel a pending reservation.

    Players can cancel their own reservations, club managers any reservation
    of their club. Paid reservations cannot be cancelled.
    """
    reservation = await reservation_service.cancel_reservation(
        db, requester, payable_type, reservation_id
    )
    return to_schema(payable_type, reservation)
