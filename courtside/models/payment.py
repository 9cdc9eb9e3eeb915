"""Payment model."""
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from courtside.core.database import Base


class Payment(Base):
    """
    Settled payment for one reservation.

    ``commission_rate`` is a snapshot of the club's rate at payment time and
    is never recomputed.
    """

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    payable_type = Column(String, nullable=False)  # facility, coach, accessory
    payable_id = Column(Integer, nullable=False)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    commission_rate = Column(Numeric(4, 2), nullable=False)
    admin_fee = Column(Numeric(10, 2), nullable=False)
    club_earning = Column(Numeric(10, 2), nullable=False)
    method = Column(String, nullable=False, default="card")  # mock
    status = Column(String, nullable=False, default="paid")  # paid, refunded
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("payable_type", "payable_id", name="uq_payments_payable"),
    )
