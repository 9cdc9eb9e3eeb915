"""Payment schemas."""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal

from courtside.models.reservation import PayableType
from courtside.schemas.reservation import ReservationInDB


class PaymentRequest(BaseModel):
    """Schema for paying a reservation."""

    item_type: PayableType = PayableType.FACILITY
    item_id: int
    method: Optional[str] = None


class PaymentInDB(BaseModel):
    """Schema for payment from database."""

    id: int
    payable_type: str
    payable_id: int
    player_id: int
    club_id: int
    amount: Decimal
    commission_rate: Decimal
    admin_fee: Decimal
    club_earning: Decimal
    method: str
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PaymentResult(BaseModel):
    """Paid reservation together with its payment record."""

    item_type: PayableType
    reservation: ReservationInDB
    payment: PaymentInDB
