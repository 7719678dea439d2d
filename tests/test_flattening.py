import asyncio

import pytest
from lazyseq import (
    EvaluationError, SequenceConsumedError, concatenate, flat_map,
    flat_map_async, from_async, from_iterable, to_list)
from lazyseq.instrument import monitor


def tracked_generator(values, name, log):
    try:
        for v in values:
            yield v
    finally:
        log.append(name)


def test_flat_map_ordering():
    assert list(flat_map([1, 2], lambda x: [x, x * 10])) == [1, 10, 2, 20]
    assert list(flat_map([], lambda x: [x])) == []
    assert list(flat_map([1, 2, 3], lambda x: [])) == []
    assert list(flat_map([0, 1, 2], lambda x: range(x))) == [0, 0, 1]


def test_flat_map_laziness():
    outer = monitor([1, 2, 3])
    inners = []

    def expand(x):
        inner = monitor([x] * 3)
        inners.append(inner)
        return inner

    result = flat_map(outer, expand)
    assert outer.n_cursors == 0

    cursor = result.cursor()
    assert next(cursor) == 1
    assert outer.n_values == 1
    assert len(inners) == 1

    # inner sequence is exhausted before the next outer value is pulled
    assert [next(cursor), next(cursor)] == [1, 1]
    assert outer.n_values == 1
    assert next(cursor) == 2
    assert outer.n_values == 2
    assert inners[0].n_releases == 1

    cursor.close()
    assert inners[1].n_releases == 1
    assert outer.n_releases == 1


def test_flat_map_close_order():
    log = []
    outer = from_iterable(tracked_generator([1, 2], "outer", log))

    def expand(x):
        return tracked_generator([x, x], "inner {}".format(x), log)

    cursor = flat_map(outer, expand).cursor()
    assert next(cursor) == 1
    cursor.close()
    assert log == ["inner 1", "outer"]


def test_flat_map_with_index():
    result = flat_map(['a', 'b'], lambda x, i: [x] * (i + 1), with_index=True)
    assert list(result) == ['a', 'b', 'b']


def test_flat_map_exceptions():
    outer = monitor([1, 2, 3])

    def expand(x):
        if x == 2:
            raise ValueError
        return [x]

    with pytest.raises(EvaluationError):
        list(flat_map(outer, expand))
    assert outer.n_releases == 1

    # non iterable inner values are reported as evaluation errors
    with pytest.raises(EvaluationError):
        list(flat_map([1], lambda x: x))


def test_inner_fault():
    outer = monitor([1, 2])

    def broken(x):
        yield x
        raise KeyError(x)

    cursor = flat_map(outer, broken).cursor()
    assert next(cursor) == 1
    with pytest.raises(KeyError):
        next(cursor)
    assert outer.n_releases == 1
    assert cursor.closed


def test_concatenate():
    data1 = [0, 1, 2, 3]
    data2 = [4, 5]
    data3 = [6, 7, 8, 9, 10, 11]
    result = concatenate([data1, data2, data3])
    assert list(result) == list(range(12))
    assert list(result) == list(range(12))


def test_concatenate_single_use_elements():
    result = concatenate([(i for i in range(3)), [10]])
    assert result.reiterable
    assert list(result) == [0, 1, 2, 10]

    assert not result.reiterable
    with pytest.raises(SequenceConsumedError):
        list(result)

    # fresh generators from a single-use outer sequence
    result = concatenate(iter([(i for i in range(2)), [5]]))
    assert list(result) == [0, 1, 5]


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_async_flat_map():
    async def agen(x):
        for i in range(2):
            await asyncio.sleep(0)
            yield x * 10 + i

    # inner sequences can be of either protocol
    result = flat_map(from_async([1, 2]), agen)
    assert await to_list(result) == [10, 11, 20, 21]
    result = flat_map(from_async([1, 2]), lambda x: [x, -x])
    assert await to_list(result) == [1, -1, 2, -2]

    async def fetch(x):
        await asyncio.sleep(0)
        return [x] * x

    result = flat_map_async([1, 2, 3], fetch)
    assert await to_list(result) == [1, 2, 2, 3, 3, 3]

    result = concatenate(from_async([[1], agen(5)]))
    assert await to_list(result) == [1, 50, 51]
    assert not result.reiterable
    with pytest.raises(SequenceConsumedError):
        await to_list(result)


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_async_flat_map_close():
    log = []

    async def inner(x):
        try:
            yield x
            yield x
        finally:
            log.append("inner {}".format(x))

    outer = monitor(from_async([1, 2]))
    cursor = flat_map(outer, inner).cursor()
    assert await cursor.__anext__() == 1
    await cursor.close()

    assert log == ["inner 1"]
    assert outer.n_releases == 1
