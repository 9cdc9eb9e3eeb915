"""Commission split between the platform and the club."""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from courtside.core.config import settings
from courtside.core.exceptions import (
    ForbiddenException,
    RejectionReason,
    ValidationException,
)
from courtside.models.club import Club
from courtside.services.pricing import Number, round2, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settlement:
    amount: Decimal
    commission_rate: Decimal
    admin_fee: Decimal
    club_earning: Decimal


def settle(amount: Number, commission_rate: Number) -> Settlement:
    """Split ``amount`` into the platform's fee and the club's earning."""
    amount = to_decimal(amount)
    rate = to_decimal(commission_rate)
    admin_fee = round2(amount * rate)
    return Settlement(
        amount=amount,
        commission_rate=rate,
        admin_fee=admin_fee,
        club_earning=round2(amount - admin_fee),
    )


def resolve_commission_rate(
    club: Club,
    allowed_rates: Optional[Iterable[Number]] = None,
) -> Decimal:
    """
    Read the rate to snapshot onto a payment.

    The club must be approved. A missing rate falls back to the configured
    default; any rate outside the allowed set is rejected.
    """
    if not club.approved:
        logger.warning(f"Payment refused: club {club.id} is not approved")
        raise ForbiddenException(
            RejectionReason.CLUB_NOT_APPROVED,
            "Club not approved",
            {"club_id": club.id},
        )

    if club.commission_rate is None:
        rate = to_decimal(settings.DEFAULT_COMMISSION_RATE)
    else:
        rate = to_decimal(club.commission_rate)

    if allowed_rates is None:
        allowed_rates = settings.ALLOWED_COMMISSION_RATES
    allowed = {to_decimal(r) for r in allowed_rates}
    if rate not in allowed:
        raise ValidationException(
            RejectionReason.INVALID_COMMISSION_RATE,
            "Club commission rate is not one of the allowed rates",
            {"club_id": club.id, "commission_rate": str(rate)},
        )
    return rate
