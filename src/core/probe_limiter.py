import asyncio
import itertools
import logging
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class ProbeSlot:
    """A capacity token handed out by ProbeLimiter."""

    __slots__ = ("slot_id", "released")

    def __init__(self, slot_id: int):
        self.slot_id = slot_id
        self.released = False

    def __repr__(self):
        return f"ProbeSlot(slot_id={self.slot_id}, released={self.released})"


class ProbeLimiter:
    """
    Bounds how many probes run at once across a batch.

    ``acquire`` suspends until a slot is free. Waiters are served in whatever
    order asyncio wakes them; no fairness is promised.
    """

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._semaphore = asyncio.Semaphore(capacity)
        self._ids = itertools.count()
        self.in_flight = 0
        self.peak_in_flight = 0

    async def acquire(self) -> ProbeSlot:
        await self._semaphore.acquire()
        self.in_flight += 1
        if self.in_flight > self.peak_in_flight:
            self.peak_in_flight = self.in_flight
        slot = ProbeSlot(next(self._ids))
        logger.debug(f"Acquired {slot}; {self.in_flight}/{self.capacity} in flight")
        return slot

    def release(self, slot: ProbeSlot):
        if slot.released:
            raise RuntimeError(f"{slot} released twice")
        slot.released = True
        self.in_flight -= 1
        self._semaphore.release()
        logger.debug(f"Released {slot}; {self.in_flight}/{self.capacity} in flight")

    @asynccontextmanager
    async def slot(self):
        """Hold a slot for the body of an ``async with`` block."""
        acquired = await self.acquire()
        try:
            yield acquired
        finally:
            self.release(acquired)
