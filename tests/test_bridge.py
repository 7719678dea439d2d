import asyncio

import pytest
from lazyseq import DONE, Result, filter, from_async, from_iterable, map, of, to_list
from lazyseq.bridge import AsyncBridge, as_async_sequence
from lazyseq.instrument import monitor


async def delayed(value, delay=.01, log=None):
    if log is not None:
        log.append(("start", value))
    await asyncio.sleep(delay)
    if log is not None:
        log.append(("stop", value))
    return value


async def failing(delay=.01):
    await asyncio.sleep(delay)
    raise ValueError("deferred failure")


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_bridge_order():
    seq = from_async([1, 2, 3, 4])
    assert isinstance(seq, AsyncBridge)
    assert seq.reiterable
    assert await to_list(seq) == [1, 2, 3, 4]
    assert await to_list(seq) == [1, 2, 3, 4]

    seq = from_async(x for x in range(3))
    assert not seq.reiterable
    assert await to_list(seq) == [0, 1, 2]


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_bridge_awaits_one_at_a_time():
    log = []
    values = [delayed(i, delay=.03 - i * .01, log=log) for i in range(3)]
    seq = from_async(values)

    assert await to_list(seq) == [0, 1, 2]
    assert log == [
        ("start", 0), ("stop", 0),
        ("start", 1), ("stop", 1),
        ("start", 2), ("stop", 2)]


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_bridge_mixed_values():
    seq = from_async([delayed('a'), 'b', delayed('c')])
    assert await to_list(seq) == ['a', 'b', 'c']


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_bridge_no_prefetch():
    source = monitor([1, 2, 3])
    cursor = from_async(source).cursor()
    assert source.n_pulls == 0

    assert await cursor.pull() == Result(1)
    assert source.n_pulls == 1

    await cursor.close()
    assert source.n_pulls == 1
    assert source.n_releases == 1


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_bridge_deferred_fault():
    values = iter([delayed(1), failing(), delayed(3)])
    source = monitor(values)
    cursor = from_async(source).cursor()

    assert await cursor.pull() == Result(1)
    with pytest.raises(ValueError):
        await cursor.pull()

    assert cursor.closed
    assert source.n_releases == 1
    assert await cursor.pull() == DONE

    # the remaining element was never awaited
    remaining = next(values)
    remaining.close()


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_sync_async_equivalence():
    arr = [1, 2, 3, 4]

    def pipeline(seq):
        evens = filter(seq, lambda x: x % 2 == 0)
        return map(evens, lambda x: x * 2)

    sync_values = list(pipeline(from_iterable(arr)))
    async_values = await to_list(from_async(pipeline(from_iterable(arr))))
    bridged_values = await to_list(pipeline(from_async(arr)))

    assert sync_values == [4, 8]
    assert async_values == sync_values
    assert bridged_values == sync_values


def test_as_async_sequence():
    seq = from_async(of(1, 2))
    assert as_async_sequence(seq) is seq

    with pytest.raises(TypeError):
        as_async_sequence(42)
