import asyncio
import random

import pytest
from lazyseq import EvaluationError, filter, filter_async, from_async, to_list
from lazyseq.instrument import monitor


def test_filter_basics():
    data = [random.randint(0, 100) for _ in range(200)]

    def keep(x):
        return x % 3 == 0

    source = monitor(data)
    result = filter(source, keep)
    assert source.n_cursors == 0

    assert list(result) == [x for x in data if keep(x)]
    assert source.n_values == len(data)
    assert source.n_releases == 1


def test_filter_pulls_until_match():
    source = monitor([1, 3, 5, 6, 7, 8])
    cursor = filter(source, lambda x: x % 2 == 0).cursor()

    assert next(cursor) == 6
    assert source.n_values == 4
    assert next(cursor) == 8
    assert source.n_values == 6
    assert next(cursor, None) is None
    assert source.n_releases == 1


def test_filter_with_index():
    result = filter('abcdef', lambda x, i: i % 2 == 1, with_index=True)
    assert list(result) == ['b', 'd', 'f']


def test_filter_exceptions():
    def keep(x):
        if x > 3:
            raise KeyError(x)
        return True

    source = monitor(range(10))
    cursor = filter(source, keep).cursor()

    assert [next(cursor) for _ in range(4)] == [0, 1, 2, 3]
    with pytest.raises(EvaluationError):
        next(cursor)
    assert source.n_releases == 1

    with pytest.raises(TypeError):
        filter([], "not callable")


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_async_filter():
    data = list(range(20))
    result = filter(from_async(data), lambda x: x % 4 == 0)
    assert await to_list(result) == [0, 4, 8, 12, 16]

    async def keep(x):
        await asyncio.sleep(0)
        return x > 15

    source = monitor(from_async(data))
    result = filter_async(source, keep)
    assert await to_list(result) == [16, 17, 18, 19]
    assert source.n_values == len(data)
    assert source.n_releases == 1
