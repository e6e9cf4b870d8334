import asyncio

import pytest

from randpass import pool as pool_module
from randpass.errors import EntropyFailure
from randpass.pool import DEFAULT_POOL_SIZE, RandomBytePool


def test_new_pool_starts_exhausted(sequence_source):
    pool = RandomBytePool(sequence_source)
    assert pool.capacity == DEFAULT_POOL_SIZE
    assert pool.remaining == 0
    assert pool.refill_count == 0
    assert not pool.refill_in_flight

def test_capacity_must_be_positive(sequence_source):
    with pytest.raises(ValueError):
        RandomBytePool(sequence_source, capacity=0)

@pytest.mark.asyncio
async def test_first_read_triggers_refill(sequence_source):
    pool = RandomBytePool(sequence_source, capacity=16)
    assert await pool.next_byte() == 0
    assert sequence_source.calls == 1
    assert pool.remaining == 15

@pytest.mark.asyncio
async def test_sequential_reads_refill_when_drained(sequence_source):
    pool = RandomBytePool(sequence_source, capacity=4)
    values = [await pool.next_byte() for _ in range(10)]
    assert values == list(range(10))
    assert sequence_source.calls == 3
    assert pool.refill_count == 3
    assert pool.remaining == 2

@pytest.mark.asyncio
async def test_concurrent_consumers_share_one_refill(sequence_source):
    pool = RandomBytePool(sequence_source, capacity=64)
    results = await asyncio.gather(*(pool.next_byte() for _ in range(50)))
    assert sequence_source.calls == 1
    # every consumer read from the same buffer, no byte handed out twice
    assert sorted(results) == list(range(50))

@pytest.mark.asyncio
async def test_consumers_that_find_buffer_drained_wait_for_next_refill(sequence_source):
    pool = RandomBytePool(sequence_source, capacity=4)
    results = await asyncio.gather(*(pool.next_byte() for _ in range(10)))
    assert sorted(results) == list(range(10))
    assert sequence_source.calls == 3
    assert not pool.refill_in_flight

@pytest.mark.asyncio
async def test_failure_reaches_every_waiter_and_clears_in_flight(make_flaky_source):
    source = make_flaky_source(failures=1, message="device gone")
    pool = RandomBytePool(source, capacity=8)
    results = await asyncio.gather(*(pool.next_byte() for _ in range(3)), return_exceptions=True)
    assert all(isinstance(r, EntropyFailure) for r in results)
    assert all(r.message == "device gone" for r in results)
    assert source.calls == 1
    assert not pool.refill_in_flight
    assert pool.remaining == 0

@pytest.mark.asyncio
async def test_pool_recovers_after_failure(flaky_source):
    pool = RandomBytePool(flaky_source, capacity=8)
    with pytest.raises(EntropyFailure):
        await pool.next_byte()
    assert await pool.next_byte() == 0
    assert flaky_source.calls == 2
    assert pool.refill_count == 1

@pytest.mark.asyncio
async def test_short_response_is_a_failure(short_source):
    pool = RandomBytePool(short_source, capacity=8)
    with pytest.raises(EntropyFailure):
        await pool.next_byte()
    assert not pool.refill_in_flight

@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_refill(make_gated_source):
    source = make_gated_source()
    pool = RandomBytePool(source, capacity=8)
    first = asyncio.ensure_future(pool.next_byte())
    second = asyncio.ensure_future(pool.next_byte())
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert pool.refill_in_flight
    first.cancel()
    source.gate.set()
    assert await second == 0
    assert first.cancelled()
    assert source.calls == 1

@pytest.mark.asyncio
async def test_gives_up_when_others_keep_draining_the_refill(sequence_source, monkeypatch):
    monkeypatch.setattr(pool_module, "MAX_REFILL_WAITS", 1)
    pool = RandomBytePool(sequence_source, capacity=1)
    results = await asyncio.gather(*(pool.next_byte() for _ in range(3)), return_exceptions=True)
    # the first waiter takes the only fresh byte; the others exhaust their single wait
    assert results[0] == 0
    assert all(isinstance(r, EntropyFailure) for r in results[1:])
    assert sequence_source.calls == 1
    assert not pool.refill_in_flight
