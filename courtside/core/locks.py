"""Per-resource mutual exclusion for check-then-write sequences."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Hashable, Tuple
from weakref import WeakValueDictionary

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class ResourceLocks:
    """
    Hands out one asyncio.Lock per resource key.

    Locks live only while somebody holds or waits on them, so the registry
    does not grow with the number of resources ever touched. This serialises
    requests inside one process; the row locks and conditional updates issued
    by the services cover the multi-process case.
    """

    def __init__(self):
        self._locks: "WeakValueDictionary[Tuple[str, Hashable], asyncio.Lock]" = (
            WeakValueDictionary()
        )

    def _lock_for(self, kind: str, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get((kind, key))
        if lock is None:
            lock = asyncio.Lock()
            self._locks[(kind, key)] = lock
        return lock

    @asynccontextmanager
    async def hold(self, kind: str, key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for ``(kind, key)`` for the duration of the block."""
        lock = self._lock_for(kind, key)
        if lock.locked():
            logger.debug(f"Waiting for lock on {kind}:{key}")
        async with lock:
            yield

    @asynccontextmanager
    async def transaction(self, db: AsyncSession, kind: str, key: Hashable) -> AsyncIterator[None]:
        """
        Run a check-then-write block as one unit for ``(kind, key)``.

        The session is committed before the lock is released, or rolled back
        if the block raises.
        """
        async with self.hold(kind, key):
            try:
                yield
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    def __len__(self) -> int:
        return len(self._locks)


# Singleton instance
resource_locks = ResourceLocks()
