"""
randpass.entropy
Entropy sources: where the byte pool gets its cryptographically secure bytes.

A source is anything with an async ``request_bytes(count)`` that either
returns exactly ``count`` bytes or raises EntropyFailure with a readable
message. The pool never calls a source concurrently with itself.
"""

import asyncio
import logging
import secrets
from abc import ABC, abstractmethod

from .errors import EntropyFailure

log = logging.getLogger(__name__)


class EntropySource(ABC):
    """Abstract provider of cryptographically secure random bytes."""

    @abstractmethod
    async def request_bytes(self, count: int) -> bytes:
        """
        Return exactly ``count`` random bytes.
        Raises EntropyFailure if the bytes cannot be produced.
        """


class SystemEntropySource(EntropySource):
    """
    OS CSPRNG via ``secrets.token_bytes``. The read runs in a worker thread
    so a large refill does not block the event loop.
    """

    async def request_bytes(self, count: int) -> bytes:
        if count <= 0:
            raise ValueError("count must be > 0")
        log.debug("Requesting %d bytes from the system CSPRNG", count)
        try:
            return await asyncio.to_thread(secrets.token_bytes, count)
        except (OSError, NotImplementedError) as e:
            raise EntropyFailure(f"System random source unavailable: {e}") from e
