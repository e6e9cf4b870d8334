"""
randpass.pool
Buffered random bytes. Fetching from the entropy source is comparatively
expensive, so bytes are pulled in large blocks and handed out one at a time.
"""

import asyncio
import logging
from typing import Optional

from .entropy import EntropySource, SystemEntropySource
from .errors import EntropyFailure

log = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 65536
# How many times one caller may find the pool drained by other consumers
# after waiting for a refill before giving up.
MAX_REFILL_WAITS = 64


class RandomBytePool:
    """
    Fixed-capacity buffer of random bytes refilled from an EntropySource.

    At most one refill is outstanding at any time; every consumer that runs
    the pool dry while it is in flight waits on that same refill.
    """

    def __init__(self, source: Optional[EntropySource] = None, capacity: int = DEFAULT_POOL_SIZE):
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._source = source or SystemEntropySource()
        self._capacity = capacity
        self._buffer = bytes(capacity)
        # starts exhausted so the first read triggers a refill
        self._cursor = capacity
        self._refill_task: Optional[asyncio.Task] = None
        self._refill_count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def remaining(self) -> int:
        """Number of unread bytes currently buffered."""
        return self._capacity - self._cursor

    @property
    def refill_count(self) -> int:
        """Number of refills that completed successfully."""
        return self._refill_count

    @property
    def refill_in_flight(self) -> bool:
        return self._refill_task is not None

    def _exhausted(self) -> bool:
        return self._cursor >= self._capacity

    async def _refill(self) -> None:
        try:
            data = await self._source.request_bytes(self._capacity)
            if len(data) != self._capacity:
                raise EntropyFailure(
                    f"Entropy source returned {len(data)} bytes, expected {self._capacity}"
                )
            self._buffer = bytes(data)
            self._cursor = 0
            self._refill_count += 1
            log.debug("Random pool refilled with %d bytes", self._capacity)
        finally:
            self._refill_task = None

    def _start_refill(self) -> asyncio.Task:
        if self._refill_task is None:
            self._refill_task = asyncio.ensure_future(self._refill())
        return self._refill_task

    async def next_byte(self) -> int:
        """
        Return one random byte in [0, 255], waiting for a refill if the
        buffer has run out.
        Raises EntropyFailure if the source fails.
        """
        for _ in range(MAX_REFILL_WAITS):
            if self._exhausted():
                # shield: a cancelled waiter must not cancel the shared refill
                await asyncio.shield(self._start_refill())
            # another consumer may have drained the fresh buffer while we waited
            if not self._exhausted():
                value = self._buffer[self._cursor]
                self._cursor += 1
                return value
        raise EntropyFailure(
            f"Random pool drained by other consumers {MAX_REFILL_WAITS} times in a row"
        )
