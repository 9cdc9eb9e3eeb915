"""
Seat and stock accounting.

Class seats are a hard ledger: ``booked_count`` only moves through the
conditional updates below, so the check and the increment are one SQL
statement. Accessory stock is a ceiling per order and is never decremented.
"""
import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.exceptions import ConflictException, RejectionReason, ValidationException
from courtside.models.accessory import Accessory
from courtside.models.coach import ClassSession

logger = logging.getLogger(__name__)


def _require_positive(count: int, field: str) -> None:
    if count is None or count < 1:
        raise ValidationException(
            RejectionReason.INVALID_QUANTITY,
            f"{field} must be at least 1",
            {field: count},
        )


def check_seats(session: ClassSession, count: int) -> None:
    """Reject unless ``count`` more seats fit in the session."""
    _require_positive(count, "participants")
    if session.booked_count + count > session.max_capacity:
        raise ConflictException(
            RejectionReason.CAPACITY_EXCEEDED,
            "Not enough seats left in this class",
            {
                "session_id": session.id,
                "requested": count,
                "booked": session.booked_count,
                "max_capacity": session.max_capacity,
            },
        )


async def reserve_seats(db: AsyncSession, session: ClassSession, count: int) -> int:
    """
    Atomically take ``count`` seats from a class session.

    Returns the new booked count. The UPDATE re-checks capacity so a stale
    in-memory ``session`` can never push the ledger over ``max_capacity``.
    """
    check_seats(session, count)

    result = await db.execute(
        update(ClassSession)
        .where(
            ClassSession.id == session.id,
            ClassSession.booked_count + count <= ClassSession.max_capacity,
        )
        .values(booked_count=ClassSession.booked_count + count)
        .execution_options(synchronize_session=False)
    )
    await db.refresh(session)
    if result.rowcount != 1:
        logger.warning(f"Capacity race lost on class session {session.id}")
        check_seats(session, count)
        raise ConflictException(
            RejectionReason.CAPACITY_EXCEEDED,
            "Not enough seats left in this class",
            {"session_id": session.id, "requested": count},
        )

    logger.info(
        f"Reserved {count} seat(s) on class session {session.id} "
        f"({session.booked_count}/{session.max_capacity})"
    )
    return session.booked_count


async def release_seats(db: AsyncSession, session_id: int, count: int) -> bool:
    """Give ``count`` seats back, never dropping below zero. Returns whether any were released."""
    result = await db.execute(
        update(ClassSession)
        .where(ClassSession.id == session_id, ClassSession.booked_count >= count)
        .values(booked_count=ClassSession.booked_count - count)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning(
            f"Seat release skipped on class session {session_id}: "
            f"fewer than {count} seat(s) booked or session missing"
        )
        return False

    logger.info(f"Released {count} seat(s) on class session {session_id}")
    return True


def check_stock(accessory: Accessory, qty: int) -> None:
    """Reject orders asking for more units than the club holds."""
    _require_positive(qty, "qty")
    if qty > accessory.stock:
        raise ConflictException(
            RejectionReason.INSUFFICIENT_STOCK,
            "Not enough stock",
            {"accessory_id": accessory.id, "requested": qty, "stock": accessory.stock},
        )
