import asyncio
import os
import tempfile

import pytest

from randpass.entropy import EntropySource
from randpass.errors import EntropyFailure

# keep the suite away from the developer's real ~/.randpass/config.json
os.environ["RANDPASS_CONFIG"] = os.path.join(tempfile.mkdtemp(prefix="randpass-"), "config.json")


class SequenceSource(EntropySource):
    """Counts 0, 1, 2, ... (mod 256), continuing across requests."""

    def __init__(self):
        self.calls = 0
        self._next = 0

    async def request_bytes(self, count: int) -> bytes:
        self.calls += 1
        await asyncio.sleep(0)
        out = bytes((self._next + i) % 256 for i in range(count))
        self._next = (self._next + count) % 256
        return out


class FlakySource(SequenceSource):
    """Fails the first `failures` requests, then behaves like SequenceSource."""

    def __init__(self, failures: int = 1, message: str = "entropy unavailable"):
        super().__init__()
        self.failures = failures
        self.message = message

    async def request_bytes(self, count: int) -> bytes:
        if self.failures > 0:
            self.failures -= 1
            self.calls += 1
            await asyncio.sleep(0)
            raise EntropyFailure(self.message)
        return await super().request_bytes(count)


class GatedSource(SequenceSource):
    """Holds every request until `gate` is set."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()

    async def request_bytes(self, count: int) -> bytes:
        await self.gate.wait()
        return await super().request_bytes(count)


class SlowSource(SequenceSource):
    """Takes `delay` seconds to answer each request."""

    def __init__(self, delay: float = 0.2):
        super().__init__()
        self.delay = delay

    async def request_bytes(self, count: int) -> bytes:
        await asyncio.sleep(self.delay)
        return await super().request_bytes(count)


class ShortSource(EntropySource):
    async def request_bytes(self, count: int) -> bytes:
        return bytes(count - 1)


@pytest.fixture
def sequence_source():
    return SequenceSource()


@pytest.fixture
def flaky_source():
    return FlakySource()


@pytest.fixture
def short_source():
    return ShortSource()


@pytest.fixture
def make_gated_source():
    # created inside the test so the Event binds to the running loop
    return GatedSource


@pytest.fixture
def make_flaky_source():
    return FlakySource


@pytest.fixture
def make_slow_source():
    return SlowSource
