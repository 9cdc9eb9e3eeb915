"""Caller identity schemas."""
import enum
from typing import Optional

from pydantic import BaseModel


class Role(str, enum.Enum):
    PLAYER = "player"
    CLUB = "club"
    ADMIN = "admin"


class Requester(BaseModel):
    """Validated identity handed over by the authentication layer."""

    user_id: int
    role: Role
    club_id: Optional[int] = None
