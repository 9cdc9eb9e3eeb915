"""Reservation service: creating, cancelling and returning reservations."""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.config import settings
from courtside.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    RejectionReason,
    ValidationException,
)
from courtside.core.locks import ResourceLocks, resource_locks
from courtside.models.coach import Coach
from courtside.models.reservation import (
    RESERVATION_MODELS,
    AccessoryOrder,
    AccessoryOrderKind,
    CoachBooking,
    CoachBookingKind,
    FacilityBooking,
    PayableType,
    ReservationStatus,
)
from courtside.schemas.identity import Requester, Role
from courtside.services import capacity_tracker, pricing
from courtside.services.catalog import CatalogGateway, catalog
from courtside.services.conflict_detector import check_conflict, validate_duration
from courtside.services.lifecycle import LifecycleAction, apply_transition
from courtside.services.time_windows import Interval, fits_within_weekly_window

logger = logging.getLogger(__name__)


def reservation_lock_key(payable_type: PayableType, reservation_id: int):
    return (PayableType(payable_type).value, reservation_id)


async def load_reservation(
    db: AsyncSession,
    payable_type: PayableType,
    reservation_id: int,
    *,
    for_update: bool = False,
):
    """Fetch a reservation of the given kind or raise RESERVATION_NOT_FOUND."""
    model = RESERVATION_MODELS[PayableType(payable_type)]
    query = select(model).where(model.id == reservation_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    reservation = result.scalar_one_or_none()
    if not reservation:
        raise NotFoundException(
            RejectionReason.RESERVATION_NOT_FOUND,
            f"{PayableType(payable_type).value.capitalize()} reservation not found",
            {"payable_type": PayableType(payable_type).value, "reservation_id": reservation_id},
        )
    return reservation


def authorize(requester: Requester, reservation, *, allow_player: bool = True, allow_club: bool = False) -> None:
    """Only the owning player, or the manager of the owning club, may act on a reservation."""
    if allow_player and requester.role == Role.PLAYER and reservation.player_id == requester.user_id:
        return
    if allow_club and requester.role == Role.CLUB and requester.club_id == reservation.club_id:
        return
    raise ForbiddenException(
        RejectionReason.NOT_OWNER,
        "Requester does not own this reservation",
        {"reservation_id": reservation.id, "requester_id": requester.user_id},
    )


class ReservationService:
    """Service turning reservation requests into pending reservations."""

    def __init__(self, catalog_gateway: CatalogGateway = catalog, locks: ResourceLocks = resource_locks):
        self.catalog = catalog_gateway
        self.locks = locks

    def _require_player(self, requester: Requester) -> None:
        if requester.role != Role.PLAYER:
            raise ForbiddenException(
                RejectionReason.ROLE_NOT_ALLOWED,
                "Only players can make reservations",
                {"role": requester.role.value},
            )

    def _option_disabled(self, message: str, **details) -> ValidationException:
        return ValidationException(RejectionReason.OPTION_DISABLED, message, details)

    async def create_facility_booking(
        self,
        db: AsyncSession,
        requester: Requester,
        facility_id: int,
        start_time: datetime,
        end_time: datetime,
    ) -> FacilityBooking:
        """
        Book a facility for ``[start_time, end_time)``.

        Members get the membership discount on the base price. The overlap
        scan and the insert run under the facility's lock.
        """
        self._require_player(requester)
        interval = Interval(start_time, end_time)

        facility = await self.catalog.get_facility(db, facility_id)
        club = await self.catalog.get_approved_club(db, facility.club_id)
        player = await self.catalog.get_player(db, requester.user_id)

        async with self.locks.transaction(db, "facility", facility_id):
            facility = await self.catalog.get_facility(db, facility_id, for_update=True)
            existing = await self._live_facility_bookings(db, facility_id)
            hours = check_conflict(
                facility_id, interval, existing, max_hours=settings.MAX_BOOKING_HOURS
            )
            quote = pricing.quote_facility(
                facility.hourly_price,
                hours,
                player.is_member,
                settings.MEMBERSHIP_DISCOUNT_RATE,
            )
            booking = FacilityBooking(
                player_id=player.id,
                club_id=club.id,
                facility_id=facility.id,
                sport=facility.sport,
                start_time=interval.start,
                end_time=interval.end,
                base_price=quote.base,
                discount=quote.discount,
                total=quote.total,
                membership_applied=quote.membership_applied,
                status=ReservationStatus.PENDING.value,
            )
            db.add(booking)

        await db.refresh(booking)
        logger.info(
            f"Facility booking {booking.id} created for player {player.id} on facility "
            f"{facility_id} ({interval.start.isoformat()} - {interval.end.isoformat()}), total {booking.total}"
        )
        return booking

    async def _live_facility_bookings(self, db: AsyncSession, facility_id: int) -> List[FacilityBooking]:
        result = await db.execute(
            select(FacilityBooking).where(
                FacilityBooking.facility_id == facility_id,
                FacilityBooking.status != ReservationStatus.CANCELLED.value,
            )
        )
        return list(result.scalars().all())

    async def create_personal_coach_booking(
        self,
        db: AsyncSession,
        requester: Requester,
        coach_id: int,
        start_time: datetime,
        end_time: datetime,
    ) -> CoachBooking:
        """Book a one-to-one session inside one of the coach's weekly windows."""
        self._require_player(requester)
        interval = Interval(start_time, end_time)

        coach = await self.catalog.get_coach(db, coach_id)
        if not coach.active or not coach.personal_enabled:
            raise self._option_disabled("Personal coaching is not available", coach_id=coach_id)
        club = await self.catalog.get_approved_club(db, coach.club_id)
        player = await self.catalog.get_player(db, requester.user_id)

        validate_duration(interval, settings.MAX_BOOKING_HOURS)
        windows = self.catalog.weekly_windows(coach)
        if not fits_within_weekly_window(interval, windows, club.timezone):
            logger.warning(f"Personal booking outside availability for coach {coach_id}")
            raise ValidationException(
                RejectionReason.OUTSIDE_AVAILABILITY,
                "Requested time is outside the coach's availability",
                {"coach_id": coach_id},
            )

        async with self.locks.transaction(db, "coach", coach_id):
            coach = await self.catalog.get_coach(db, coach_id, for_update=True)
            existing = await self._live_personal_bookings(db, coach_id)
            hours = check_conflict(
                coach_id, interval, existing, max_hours=settings.MAX_BOOKING_HOURS
            )
            quote = pricing.quote_personal_coach(coach.personal_rate_per_hour, hours)
            booking = CoachBooking(
                player_id=player.id,
                club_id=club.id,
                coach_id=coach.id,
                kind=CoachBookingKind.PERSONAL.value,
                participants=1,
                start_time=interval.start,
                end_time=interval.end,
                base_price=quote.base,
                discount=quote.discount,
                total=quote.total,
                status=ReservationStatus.PENDING.value,
            )
            db.add(booking)

        await db.refresh(booking)
        logger.info(f"Personal coach booking {booking.id} created for player {player.id} with coach {coach_id}")
        return booking

    async def _live_personal_bookings(self, db: AsyncSession, coach_id: int) -> List[CoachBooking]:
        result = await db.execute(
            select(CoachBooking).where(
                CoachBooking.coach_id == coach_id,
                CoachBooking.kind == CoachBookingKind.PERSONAL.value,
                CoachBooking.status != ReservationStatus.CANCELLED.value,
            )
        )
        return list(result.scalars().all())

    async def create_class_booking(
        self,
        db: AsyncSession,
        requester: Requester,
        coach_id: int,
        session_id: int,
        participants: int = 1,
    ) -> CoachBooking:
        """Take ``participants`` seats in a class session."""
        self._require_player(requester)

        coach: Coach = await self.catalog.get_coach(db, coach_id)
        if not coach.active or not coach.class_enabled:
            raise self._option_disabled("Classes are not available", coach_id=coach_id)
        club = await self.catalog.get_approved_club(db, coach.club_id)
        player = await self.catalog.get_player(db, requester.user_id)

        async with self.locks.transaction(db, "class_session", session_id):
            session = await self.catalog.get_class_session(db, coach_id, session_id, for_update=True)
            if not session.active:
                raise ValidationException(
                    RejectionReason.SESSION_INACTIVE,
                    "Class session is not active",
                    {"session_id": session_id},
                )
            await capacity_tracker.reserve_seats(db, session, participants)
            quote = pricing.quote_class(coach.class_price, participants)
            booking = CoachBooking(
                player_id=player.id,
                club_id=club.id,
                coach_id=coach.id,
                kind=CoachBookingKind.CLASS.value,
                class_session_id=session.id,
                participants=participants,
                start_time=session.start_time,
                end_time=session.end_time,
                base_price=quote.base,
                discount=quote.discount,
                total=quote.total,
                status=ReservationStatus.PENDING.value,
            )
            db.add(booking)

        await db.refresh(booking)
        logger.info(
            f"Class booking {booking.id} created for player {player.id}: "
            f"{participants} seat(s) on session {session_id}"
        )
        return booking

    async def create_accessory_order(
        self,
        db: AsyncSession,
        requester: Requester,
        accessory_id: int,
        kind: AccessoryOrderKind,
        qty: int,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> AccessoryOrder:
        """Rent an accessory for a time window or buy it outright."""
        self._require_player(requester)
        kind = AccessoryOrderKind(kind)

        accessory = await self.catalog.get_accessory(db, accessory_id)
        if not accessory.active:
            raise self._option_disabled("Accessory is not available", accessory_id=accessory_id)
        club = await self.catalog.get_approved_club(db, accessory.club_id)
        player = await self.catalog.get_player(db, requester.user_id)

        interval = None
        if kind == AccessoryOrderKind.RENT:
            if not accessory.rent_enabled:
                raise self._option_disabled("Renting is disabled for this accessory", accessory_id=accessory_id)
            if start_time is None or end_time is None:
                raise ValidationException(
                    RejectionReason.INVALID_INTERVAL,
                    "Rentals need a start time and an end time",
                    {"accessory_id": accessory_id},
                )
            interval = Interval(start_time, end_time)
            hours = validate_duration(interval, settings.MAX_RENTAL_HOURS)
        elif not accessory.buy_enabled:
            raise self._option_disabled("Buying is disabled for this accessory", accessory_id=accessory_id)

        async with self.locks.transaction(db, "accessory", accessory_id):
            accessory = await self.catalog.get_accessory(db, accessory_id, for_update=True)
            capacity_tracker.check_stock(accessory, qty)

            if kind == AccessoryOrderKind.RENT:
                unit_price = accessory.rent_price_per_hour
                quote = pricing.quote_accessory_rent(unit_price, hours, qty)
            else:
                unit_price = accessory.buy_price
                hours = pricing.ZERO
                quote = pricing.quote_accessory_buy(unit_price, qty)

            order = AccessoryOrder(
                player_id=player.id,
                club_id=club.id,
                accessory_id=accessory.id,
                kind=kind.value,
                qty=qty,
                unit_price=unit_price,
                hours=hours,
                start_time=interval.start if interval else None,
                end_time=interval.end if interval else None,
                base_price=quote.base,
                discount=quote.discount,
                total=quote.total,
                status=ReservationStatus.PENDING.value,
            )
            db.add(order)

        await db.refresh(order)
        logger.info(f"Accessory order {order.id} ({kind.value} x{qty}) created for player {player.id}")
        return order

    async def cancel_reservation(
        self,
        db: AsyncSession,
        requester: Requester,
        payable_type: PayableType,
        reservation_id: int,
    ):
        """
        Cancel a pending reservation.

        Allowed for the owning player and for the manager of the owning club.
        Cancelling a class booking gives its seats back when
        RESTORE_CLASS_CAPACITY_ON_CANCEL is set.
        """
        payable_type = PayableType(payable_type)

        async with self.locks.transaction(db, "reservation", reservation_lock_key(payable_type, reservation_id)):
            reservation = await load_reservation(db, payable_type, reservation_id, for_update=True)
            authorize(requester, reservation, allow_club=True)
            await apply_transition(db, reservation, LifecycleAction.CANCEL)

            if (
                isinstance(reservation, CoachBooking)
                and reservation.kind == CoachBookingKind.CLASS.value
                and settings.RESTORE_CLASS_CAPACITY_ON_CANCEL
            ):
                async with self.locks.hold("class_session", reservation.class_session_id):
                    await capacity_tracker.release_seats(
                        db, reservation.class_session_id, reservation.participants
                    )

        await db.refresh(reservation)
        logger.info(f"{payable_type.value} reservation {reservation_id} cancelled by user {requester.user_id}")
        return reservation

    async def mark_returned(self, db: AsyncSession, requester: Requester, order_id: int) -> AccessoryOrder:
        """Club manager records that a paid rental came back."""
        async with self.locks.transaction(db, "reservation", reservation_lock_key(PayableType.ACCESSORY, order_id)):
            order = await load_reservation(db, PayableType.ACCESSORY, order_id, for_update=True)
            authorize(requester, order, allow_player=False, allow_club=True)
            await apply_transition(db, order, LifecycleAction.RETURN)

        await db.refresh(order)
        logger.info(f"Accessory order {order_id} returned")
        return order


# Singleton instance
reservation_service = ReservationService()
