"""
Conflict detection for time-bounded reservations.

Handles the two checks every facility booking, personal coaching session and
accessory rental goes through:
- the requested duration must be positive and within the per-kind limit
- the interval must not overlap any live reservation on the same resource
"""
import logging
from decimal import Decimal
from typing import Any, Iterable, Optional

from courtside.core.exceptions import ConflictException, RejectionReason, ValidationException
from courtside.models.reservation import ReservationStatus
from courtside.services.time_windows import Interval, overlaps

logger = logging.getLogger(__name__)


def validate_duration(interval: Interval, max_hours: int) -> Decimal:
    """Return the interval length in hours, rejecting anything outside ``(0, max_hours]``."""
    hours = interval.hours
    if hours <= 0 or hours > max_hours:
        raise ValidationException(
            RejectionReason.INVALID_DURATION,
            f"Duration must be more than 0 and at most {max_hours} hours",
            {"hours": str(hours), "max_hours": max_hours},
        )
    return hours


def _is_live(reservation: Any) -> bool:
    return reservation.status != ReservationStatus.CANCELLED.value


def find_conflict(interval: Interval, existing: Iterable[Any]) -> Optional[Any]:
    """
    Return the first non-cancelled reservation overlapping ``interval``.

    ``existing`` holds anything with ``start_time``, ``end_time`` and
    ``status`` attributes, e.g. FacilityBooking or CoachBooking rows.
    """
    for reservation in existing:
        if not _is_live(reservation):
            continue
        if overlaps(interval, Interval(reservation.start_time, reservation.end_time)):
            return reservation
    return None


def check_conflict(
    resource_id: Any,
    interval: Interval,
    existing: Iterable[Any],
    *,
    max_hours: int,
) -> Decimal:
    """
    Accept or reject ``interval`` for a resource.

    Returns the duration in hours when the slot is free, raises
    ValidationException for a bad duration and ConflictException when the
    slot is already held.
    """
    hours = validate_duration(interval, max_hours)

    clash = find_conflict(interval, existing)
    if clash is not None:
        logger.warning(
            f"Slot taken on resource {resource_id}: requested "
            f"{interval.start.isoformat()}-{interval.end.isoformat()} "
            f"overlaps reservation {clash.id}"
        )
        raise ConflictException(
            RejectionReason.SLOT_TAKEN,
            "Time slot already booked",
            {"resource_id": resource_id, "conflicting_reservation_id": clash.id},
        )
    return hours
