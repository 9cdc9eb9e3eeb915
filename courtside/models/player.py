"""Player model."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from courtside.core.database import Base

MEMBERSHIP_NONE = "none"
MEMBERSHIP_MEMBER = "member"


class Player(Base):
    """A player identity as supplied by the account service."""

    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    membership = Column(String, nullable=False, default=MEMBERSHIP_NONE)  # none, member
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_member(self) -> bool:
        return self.membership == MEMBERSHIP_MEMBER
