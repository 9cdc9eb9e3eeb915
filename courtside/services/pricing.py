"""
Price calculation for every reservable kind.

All arithmetic is Decimal. Only the final total is rounded (half-up, two
places); base and discount are kept at full precision.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps float literals like 0.2 from turning into binary noise
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    """Round half-up to currency precision."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceQuote:
    base: Decimal
    discount: Decimal
    total: Decimal
    membership_applied: bool = False


def _plain(base: Decimal) -> PriceQuote:
    return PriceQuote(base=base, discount=ZERO, total=round2(base))


def quote_facility(
    hourly_price: Number,
    hours: Number,
    is_member: bool,
    discount_rate: Number,
) -> PriceQuote:
    """Facility bookings are the only kind that receives the membership discount."""
    base = to_decimal(hourly_price) * to_decimal(hours)
    discount = base * to_decimal(discount_rate) if is_member else ZERO
    return PriceQuote(
        base=base,
        discount=discount,
        total=round2(base - discount),
        membership_applied=is_member,
    )


def quote_personal_coach(hourly_rate: Number, hours: Number) -> PriceQuote:
    return _plain(to_decimal(hourly_rate) * to_decimal(hours))


def quote_class(class_price: Number, participants: int) -> PriceQuote:
    return _plain(to_decimal(class_price) * participants)


def quote_accessory_buy(unit_price: Number, qty: int) -> PriceQuote:
    return _plain(to_decimal(unit_price) * qty)


def quote_accessory_rent(unit_price_per_hour: Number, hours: Number, qty: int) -> PriceQuote:
    return _plain(to_decimal(unit_price_per_hour) * to_decimal(hours) * qty)
