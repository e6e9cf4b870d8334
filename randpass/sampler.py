"""
randpass.sampler
Uniform integers from pooled random bytes, without modulo bias.
"""

from typing import Optional, Sequence, TypeVar

from .pool import RandomBytePool

T = TypeVar("T")


class UniformSampler:
    def __init__(self, pool: Optional[RandomBytePool] = None):
        self.pool = pool or RandomBytePool()

    async def byte_in_range(self, low: int, high: int) -> int:
        """
        Return a uniformly distributed integer in [low, high], both inclusive
        and within [0, 255].

        Reducing a byte with ``%`` alone favours small results whenever 256
        is not a multiple of the span, so bytes above the largest multiple
        of the span are thrown away and drawn again.
        """
        if not 0 <= low <= high <= 0xFF:
            raise ValueError(f"invalid byte range [{low}, {high}]")
        span = high - low + 1
        limit = (0x100 // span) * span - 1
        value = await self.pool.next_byte()
        while value > limit:
            value = await self.pool.next_byte()
        return value % span + low

    async def choice(self, seq: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence of at most 256 items."""
        if not seq:
            raise ValueError("cannot choose from an empty sequence")
        return seq[await self.byte_in_range(0, len(seq) - 1)]
