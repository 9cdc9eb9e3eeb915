"""
Catalog gateway.

Read-only access to the club-owned catalog (clubs, facilities, coaches,
class sessions, accessories) and to player identities. Catalog CRUD lives
elsewhere; the reservation engine only consumes these definitions.
"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    RejectionReason,
)
from courtside.models.accessory import Accessory
from courtside.models.club import Club
from courtside.models.coach import ClassSession, Coach
from courtside.models.facility import Facility
from courtside.models.player import Player
from courtside.services.time_windows import WeeklyWindow

logger = logging.getLogger(__name__)


class CatalogGateway:
    """Loads catalog rows, optionally locking them for the current transaction."""

    async def _load(self, db: AsyncSession, model, ident: int, *, for_update: bool = False):
        # Catalog rows change under long-lived sessions; always read the stored values
        query = select(model).where(model.id == ident).execution_options(populate_existing=True)
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_club(self, db: AsyncSession, club_id: int) -> Club:
        club = await self._load(db, Club, club_id)
        if not club:
            raise NotFoundException(
                RejectionReason.CLUB_NOT_FOUND, "Club not found", {"club_id": club_id}
            )
        return club

    async def get_approved_club(self, db: AsyncSession, club_id: int) -> Club:
        club = await self.get_club(db, club_id)
        if not club.approved:
            raise ForbiddenException(
                RejectionReason.CLUB_NOT_APPROVED, "Club not approved", {"club_id": club_id}
            )
        return club

    async def get_player(self, db: AsyncSession, player_id: int) -> Player:
        player = await self._load(db, Player, player_id)
        if not player:
            raise NotFoundException(
                RejectionReason.PLAYER_NOT_FOUND, "Player not found", {"player_id": player_id}
            )
        return player

    async def get_facility(self, db: AsyncSession, facility_id: int, *, for_update: bool = False) -> Facility:
        facility = await self._load(db, Facility, facility_id, for_update=for_update)
        if not facility:
            raise NotFoundException(
                RejectionReason.RESOURCE_NOT_FOUND, "Facility not found", {"facility_id": facility_id}
            )
        return facility

    async def get_coach(self, db: AsyncSession, coach_id: int, *, for_update: bool = False) -> Coach:
        coach = await self._load(db, Coach, coach_id, for_update=for_update)
        if not coach:
            raise NotFoundException(
                RejectionReason.RESOURCE_NOT_FOUND, "Coach not found", {"coach_id": coach_id}
            )
        return coach

    async def get_class_session(
        self,
        db: AsyncSession,
        coach_id: int,
        session_id: int,
        *,
        for_update: bool = False,
    ) -> ClassSession:
        session = await self._load(db, ClassSession, session_id, for_update=for_update)
        if not session or session.coach_id != coach_id:
            raise NotFoundException(
                RejectionReason.RESOURCE_NOT_FOUND,
                "Class session not found",
                {"coach_id": coach_id, "session_id": session_id},
            )
        return session

    async def get_accessory(self, db: AsyncSession, accessory_id: int, *, for_update: bool = False) -> Accessory:
        accessory = await self._load(db, Accessory, accessory_id, for_update=for_update)
        if not accessory:
            raise NotFoundException(
                RejectionReason.RESOURCE_NOT_FOUND, "Accessory not found", {"accessory_id": accessory_id}
            )
        return accessory

    def weekly_windows(self, coach: Coach) -> List[WeeklyWindow]:
        return [
            WeeklyWindow(day=w.day, start_minute=w.start_minute, end_minute=w.end_minute)
            for w in coach.availability_windows
        ]


# Singleton instance
catalog = CatalogGateway()
