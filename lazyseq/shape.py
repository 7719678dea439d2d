"""Operations that change the length or grouping of a sequence."""

from collections.abc import AsyncIterable
from functools import singledispatch

from .asynchronous import AsyncDerived, LayeredAsyncCursor
from .bridge import as_async_sequence
from .cursor import Derived, LayeredCursor, as_sequence
from .result import DONE, Result
from .utils import check_positive, get_logger, isint

logger = get_logger(__name__)


class TakeCursor(LayeredCursor):
    def __init__(self, upstream, n):
        super().__init__(upstream)
        self.remaining = n

    def advance(self):
        if self.remaining == 0:
            return DONE
        self.remaining -= 1
        return self.upstream.pull()


class Take(Derived):
    def __init__(self, sequence, n):
        super().__init__(sequence)
        self.n = n

    def cursor(self):
        return TakeCursor(self.sequence.cursor(), self.n)


class AsyncTakeCursor(LayeredAsyncCursor):
    def __init__(self, upstream, n):
        super().__init__(upstream)
        self.remaining = n

    async def advance(self):
        if self.remaining == 0:
            return DONE
        self.remaining -= 1
        return await self.upstream.pull()


class AsyncTake(AsyncDerived):
    def __init__(self, sequence, n):
        super().__init__(sequence)
        self.n = n

    def cursor(self):
        return AsyncTakeCursor(self.sequence.cursor(), self.n)


@singledispatch
def take(source, n):
    """Return the first `n` values of a sequence.

    The source cursor is closed as soon as the `n`-th value has been
    delivered and the next pull is requested, without pulling an extra
    value from the source.

    Example:

        >>> import itertools
        >>> list(lazyseq.take(itertools.count(), 3))
        [0, 1, 2]
    """
    check_positive(n, "n")
    return Take(as_sequence(source), n)


@take.register(AsyncIterable)
def _(source, n):
    check_positive(n, "n")
    return AsyncTake(as_async_sequence(source), n)


class Batcher(object):
    """Accumulation rules shared by both batching cursors."""

    def __init__(self, batch_size, drop_last, pad, collate_fn):
        self.batch_size = batch_size
        self.drop_last = drop_last
        self.pad = pad
        self.collate_fn = collate_fn

    def finish(self, items, exhausted):
        """Return the result for accumulated `items`."""
        if len(items) == 0:
            return DONE

        if exhausted and len(items) < self.batch_size:
            if self.drop_last:
                return DONE
            if self.pad is not None:
                items.extend([self.pad] * (self.batch_size - len(items)))

        if self.collate_fn is not None:
            items = self.collate_fn(items)

        return Result(items)


class BatchCursor(LayeredCursor):
    def __init__(self, upstream, batcher):
        super().__init__(upstream)
        self.batcher = batcher

    def advance(self):
        items = []
        while len(items) < self.batcher.batch_size:
            result = self.upstream.pull()
            if result.done:
                return self.batcher.finish(items, exhausted=True)
            items.append(result.value)

        return self.batcher.finish(items, exhausted=False)


class Batching(Derived):
    def __init__(self, sequence, batcher):
        super().__init__(sequence)
        self.batcher = batcher

    def cursor(self):
        return BatchCursor(self.sequence.cursor(), self.batcher)


class AsyncBatchCursor(LayeredAsyncCursor):
    def __init__(self, upstream, batcher):
        super().__init__(upstream)
        self.batcher = batcher

    async def advance(self):
        items = []
        while len(items) < self.batcher.batch_size:
            result = await self.upstream.pull()
            if result.done:
                return self.batcher.finish(items, exhausted=True)
            items.append(result.value)

        return self.batcher.finish(items, exhausted=False)


class AsyncBatching(AsyncDerived):
    def __init__(self, sequence, batcher):
        super().__init__(sequence)
        self.batcher = batcher

    def cursor(self):
        return AsyncBatchCursor(self.sequence.cursor(), self.batcher)


def make_batcher(k, drop_last, pad, collate_fn):
    if not isint(k) or k <= 0:
        raise ValueError("k must be a positive integer")
    if drop_last and pad is not None:
        logger.warning("pad value is ignored because drop_last is true")
    return Batcher(k, drop_last, pad, collate_fn)


@singledispatch
def batch(source, k, drop_last=False, pad=None, collate_fn=None):
    """Return a sequence of the values grouped in blocks of k items.

    This operator buffers: each pull on the result pulls up to `k`
    values from the source before returning.

    Args:
        source (Iterable or AsyncIterable):
            The input sequence.
        k (int):
            Number of items by block.
        drop_last (bool):
            Wether the last block should be ignored if it contains less
            than k items. (default False)
        pad (Optional[any]):
            padding item value to use in order to increase the size of
            the last block to k elements, set to `None` to prevent
            padding and return an incomplete block anyways (default
            None).
        collate_fn (Callable[[list], Any]):
            An optional function that takes a list of batch items
            and returns a consolidated batch, for example
            :func:`numpy:numpy.array`.

    Return:
        Sequence: A sequence of batches.

    Example:

        >>> data = [i for i in range(10)]
        >>> batches = lazyseq.batch(data, 4, pad=-1)
        >>> list(batches)
        [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9, -1, -1]]
    """
    return Batching(as_sequence(source),
                    make_batcher(k, drop_last, pad, collate_fn))


@batch.register(AsyncIterable)
def _(source, k, drop_last=False, pad=None, collate_fn=None):
    return AsyncBatching(as_async_sequence(source),
                         make_batcher(k, drop_last, pad, collate_fn))
