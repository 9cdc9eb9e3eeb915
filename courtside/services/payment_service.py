"""Payment service: the pending -> paid transition and its settlement."""
import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.config import settings
from courtside.core.exceptions import (
    RejectionReason,
    StateConflictException,
    ValidationException,
)
from courtside.core.locks import ResourceLocks, resource_locks
from courtside.models.payment import Payment
from courtside.models.reservation import PayableType
from courtside.schemas.identity import Requester
from courtside.services.catalog import CatalogGateway, catalog
from courtside.services.lifecycle import LifecycleAction, apply_transition, transition
from courtside.services.pricing import to_decimal
from courtside.services.reservation_service import (
    authorize,
    load_reservation,
    reservation_lock_key,
)
from courtside.services.settlement import resolve_commission_rate, settle

logger = logging.getLogger(__name__)

PAYABLE_UNIQUE_CONSTRAINT = "uq_payments_payable"


def is_duplicate_payment(exc: IntegrityError) -> bool:
    """True iff ``exc`` is a violation of the one-payment-per-payable constraint."""
    # asyncpg reports the constraint name; SQLite only lists the columns
    driver_error = getattr(exc.orig, "__cause__", None)
    if getattr(driver_error, "constraint_name", None) == PAYABLE_UNIQUE_CONSTRAINT:
        return True
    message = str(exc.orig)
    return (
        PAYABLE_UNIQUE_CONSTRAINT in message
        or "UNIQUE constraint failed: payments.payable_type, payments.payable_id" in message
    )


class PaymentService:
    """Service for paying reservations (mock gateway)."""

    def __init__(self, catalog_gateway: CatalogGateway = catalog, locks: ResourceLocks = resource_locks):
        self.catalog = catalog_gateway
        self.locks = locks

    async def pay(
        self,
        db: AsyncSession,
        requester: Requester,
        payable_type: PayableType,
        reservation_id: int,
        method: Optional[str] = None,
    ) -> Tuple[object, Payment]:
        """
        Pay a pending reservation.

        Moves the reservation to ``paid`` and records exactly one Payment
        holding the commission split, in one transaction under the
        reservation's lock. A second call for the same reservation is
        rejected with ALREADY_PAID.

        Args:
            db: Database session
            requester: Paying player
            payable_type: facility, coach or accessory
            reservation_id: Reservation ID within its kind
            method: Mock payment method label

        Returns:
            The updated reservation and the new payment
        """
        payable_type = PayableType(payable_type)
        method = method or settings.DEFAULT_PAYMENT_METHOD

        try:
            async with self.locks.transaction(db, "reservation", reservation_lock_key(payable_type, reservation_id)):
                reservation = await load_reservation(db, payable_type, reservation_id, for_update=True)
                authorize(requester, reservation)

                # Reject paid/cancelled items before looking at the club
                transition(reservation.current_status, LifecycleAction.PAY)

                club = await self.catalog.get_club(db, reservation.club_id)
                commission_rate = resolve_commission_rate(club)

                amount = to_decimal(reservation.total)
                if amount <= 0:
                    raise ValidationException(
                        RejectionReason.INVALID_AMOUNT,
                        "Invalid amount",
                        {"amount": str(amount)},
                    )

                settlement = settle(amount, commission_rate)
                await apply_transition(db, reservation, LifecycleAction.PAY)

                payment = Payment(
                    payable_type=payable_type.value,
                    payable_id=reservation.id,
                    player_id=reservation.player_id,
                    club_id=reservation.club_id,
                    amount=settlement.amount,
                    commission_rate=settlement.commission_rate,
                    admin_fee=settlement.admin_fee,
                    club_earning=settlement.club_earning,
                    method=method,
                    status="paid",
                )
                db.add(payment)
                await db.flush()
        except IntegrityError as exc:
            if not is_duplicate_payment(exc):
                raise
            logger.warning(f"Duplicate payment refused for {payable_type.value} {reservation_id}")
            raise StateConflictException(
                RejectionReason.ALREADY_PAID,
                "Already paid",
                {"payable_type": payable_type.value, "reservation_id": reservation_id},
            ) from None

        await db.refresh(reservation)
        await db.refresh(payment)
        logger.info(
            f"Payment {payment.id} for {payable_type.value} {reservation_id}: amount {payment.amount}, "
            f"admin fee {payment.admin_fee}, club earning {payment.club_earning} "
            f"(rate {payment.commission_rate})"
        )
        return reservation, payment


# Singleton instance
payment_service = PaymentService()
