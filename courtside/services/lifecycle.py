"""
Reservation state machine.

    pending --pay--> paid --return--> returned   (accessory rentals only)
    pending --cancel--> cancelled

Legality is decided here and nowhere else. ``apply_transition`` persists the
change with a compare-and-set update so two concurrent requests can never
both move the same reservation out of the same state.
"""
import enum
import logging
from typing import Dict, Tuple

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from courtside.core.exceptions import (
    RejectionReason,
    StateConflictException,
    ValidationException,
)
from courtside.models.reservation import ReservationStatus

logger = logging.getLogger(__name__)


class LifecycleAction(str, enum.Enum):
    PAY = "pay"
    CANCEL = "cancel"
    RETURN = "return"


_TRANSITIONS: Dict[Tuple[ReservationStatus, LifecycleAction], ReservationStatus] = {
    (ReservationStatus.PENDING, LifecycleAction.PAY): ReservationStatus.PAID,
    (ReservationStatus.PENDING, LifecycleAction.CANCEL): ReservationStatus.CANCELLED,
    (ReservationStatus.PAID, LifecycleAction.RETURN): ReservationStatus.RETURNED,
}

_REJECTIONS: Dict[Tuple[ReservationStatus, LifecycleAction], Tuple[RejectionReason, str]] = {
    (ReservationStatus.PAID, LifecycleAction.PAY): (RejectionReason.ALREADY_PAID, "Already paid"),
    (ReservationStatus.RETURNED, LifecycleAction.PAY): (RejectionReason.ALREADY_PAID, "Already paid"),
    (ReservationStatus.CANCELLED, LifecycleAction.PAY): (RejectionReason.ITEM_CANCELLED, "Reservation cancelled"),
    (ReservationStatus.PAID, LifecycleAction.CANCEL): (
        RejectionReason.CANNOT_CANCEL_PAID,
        "Paid reservations cannot be cancelled",
    ),
    (ReservationStatus.RETURNED, LifecycleAction.CANCEL): (
        RejectionReason.CANNOT_CANCEL_PAID,
        "Paid reservations cannot be cancelled",
    ),
    (ReservationStatus.CANCELLED, LifecycleAction.CANCEL): (
        RejectionReason.ALREADY_CANCELLED,
        "Reservation already cancelled",
    ),
    (ReservationStatus.PENDING, LifecycleAction.RETURN): (RejectionReason.NOT_PAID, "Rental has not been paid"),
    (ReservationStatus.CANCELLED, LifecycleAction.RETURN): (RejectionReason.NOT_PAID, "Rental has not been paid"),
    (ReservationStatus.RETURNED, LifecycleAction.RETURN): (
        RejectionReason.ALREADY_RETURNED,
        "Rental already returned",
    ),
}


def transition(
    current: ReservationStatus,
    action: LifecycleAction,
    *,
    returnable: bool = False,
) -> ReservationStatus:
    """Return the state ``action`` leads to from ``current`` or raise."""
    current = ReservationStatus(current)

    if action == LifecycleAction.RETURN and not returnable:
        raise ValidationException(
            RejectionReason.NOT_RETURNABLE,
            "Only accessory rentals can be returned",
        )

    target = _TRANSITIONS.get((current, action))
    if target is not None:
        return target

    reason, message = _REJECTIONS[(current, action)]
    raise StateConflictException(
        reason,
        message,
        {"status": current.value, "action": action.value},
    )


async def apply_transition(
    db: AsyncSession,
    reservation,
    action: LifecycleAction,
) -> ReservationStatus:
    """
    Validate and persist a transition inside the caller's transaction.

    The UPDATE only matches while the row still holds the status that was
    validated. If another writer got there first the row is reloaded and the
    rejection is derived from the state it now holds.
    """
    returnable = getattr(reservation, "returnable", False)
    expected = reservation.current_status
    target = transition(expected, action, returnable=returnable)

    model = type(reservation)
    result = await db.execute(
        update(model)
        .where(model.id == reservation.id, model.status == expected.value)
        .values(status=target.value)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.refresh(reservation)
        logger.warning(
            f"Lost transition race on {reservation.payable_type.value} {reservation.id}: "
            f"expected {expected.value}, found {reservation.status}"
        )
        # States only move forward, so the fresh state always rejects the action
        transition(reservation.current_status, action, returnable=returnable)

    set_committed_value(reservation, "status", target.value)
    return target
