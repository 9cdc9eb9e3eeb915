"""Payment endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.api.deps import get_requester
from courtside.core.database import get_db
from courtside.schemas.identity import Requester
from courtside.schemas.payment import PaymentInDB, PaymentRequest, PaymentResult
from courtside.schemas.reservation import to_schema
from courtside.services.payment_service import payment_service

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/pay", response_model=PaymentResult)
async def pay(
    body: PaymentRequest,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    """
    Pay a pending facility booking, coach booking or accessory order.

    The payment is a mock transition: the reservation becomes ``paid`` and a
    payment with the club's commission split is recorded. Paying twice
    returns ALREADY_PAID (409).

    Args:
        body: Item type, item ID and payment method
        requester: Paying player
        db: Database session

    Returns:
        The paid reservation and its payment
    """
    reservation, payment = await payment_service.pay(
        db, requester, body.item_type, body.item_id, body.method
    )
    return PaymentResult(
        item_type=body.item_type,
        reservation=to_schema(body.item_type, reservation),
        payment=PaymentInDB.model_validate(payment),
    )
