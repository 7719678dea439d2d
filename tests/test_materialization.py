import asyncio

import pytest
from lazyseq import DONE, Result, dematerialize, from_async, materialize, to_list
from lazyseq.instrument import monitor


def failing_source(n):
    for i in range(n):
        yield i
    raise IndexError("end of data")


def test_materialize():
    assert list(materialize([1, 2])) == [Result(1), Result(2), DONE]
    assert list(materialize([])) == [DONE]

    outcomes = list(materialize(failing_source(2)))
    assert outcomes[:2] == [Result(0), Result(1)]
    assert len(outcomes) == 3
    assert outcomes[2].faulted
    assert isinstance(outcomes[2].fault, IndexError)


def test_materialize_releases_source():
    source = monitor(failing_source(3))
    cursor = materialize(source).cursor()

    assert len(list(cursor)) == 4
    assert source.n_releases == 1
    assert cursor.closed


def test_dematerialize():
    assert list(dematerialize(materialize([1, 2, 3]))) == [1, 2, 3]
    assert list(dematerialize([Result(1), DONE, Result(2)])) == [1]

    cursor = dematerialize(materialize(failing_source(2))).cursor()
    assert [next(cursor), next(cursor)] == [0, 1]
    with pytest.raises(IndexError):
        next(cursor)


@pytest.mark.asyncio
@pytest.mark.timeout(5)
async def test_async_materialize():
    async def agen():
        yield 1
        await asyncio.sleep(0)
        raise KeyError("missing")

    outcomes = await to_list(materialize(agen()))
    assert outcomes[0] == Result(1)
    assert isinstance(outcomes[1].fault, KeyError)
    assert len(outcomes) == 2

    values = dematerialize(materialize(from_async([1, 2])))
    assert await to_list(values) == [1, 2]
