"""Shared API dependencies."""
from typing import Optional

from fastapi import Header

from courtside.schemas.identity import Requester, Role


async def get_requester(
    x_user_id: int = Header(..., description="Authenticated user ID"),
    x_user_role: Role = Header(..., description="player, club or admin"),
    x_club_id: Optional[int] = Header(None, description="Club managed by a club account"),
) -> Requester:
    """
    Identity forwarded by the authentication layer.

    Tokens are verified upstream; this service trusts these headers.
    """
    return Requester(user_id=x_user_id, role=x_user_role, club_id=x_club_id)
