from collections.abc import AsyncIterable
from functools import singledispatch

from .asynchronous import AsyncCursor, AsyncDerived
from .bridge import as_async_sequence
from .cursor import Cursor, Derived, as_sequence
from .errors import format_stack, reraise_err
from .utils import call, check_callable


class FlatMappingCursor(Cursor):
    """Holds the outer cursor and at most one inner cursor."""

    def __init__(self, upstream, f, with_index, stack, wrap=as_sequence):
        super().__init__()
        self.upstream = upstream
        self.inner = None
        self.f = f
        self.wrap = wrap
        self.with_index = with_index
        self.stack = stack
        self.index = 0

    def advance(self):
        while True:
            if self.inner is not None:
                result = self.inner.pull()
                if not result.done:
                    return result
                self.inner = None

            result = self.upstream.pull()
            if result.done:
                return result

            try:
                inner = call(self.f, result.value, self.index, self.with_index)
                inner = self.wrap(inner)
            except Exception as error:
                reraise_err(self.index, error, "FlatMapping", self.stack)

            self.inner = inner.cursor()

            self.index += 1

    def release(self):
        inner, self.inner = self.inner, None
        try:
            if inner is not None:
                inner.close()
        finally:
            self.upstream.close()


class FlatMapping(Derived):
    def __init__(self, sequence, f, with_index=False, stack=None):
        check_callable(f)
        super().__init__(sequence)
        self.f = f
        self.with_index = with_index
        self.stack = stack
        self.wrap = as_sequence

    def cursor(self):
        return FlatMappingCursor(
            self.sequence.cursor(), self.f, self.with_index, self.stack,
            self.wrap)


class AsyncFlatMappingCursor(AsyncCursor):
    def __init__(self, upstream, f, with_index, awaited, stack,
                 wrap=as_async_sequence):
        super().__init__()
        self.upstream = upstream
        self.inner = None
        self.f = f
        self.wrap = wrap
        self.with_index = with_index
        self.awaited = awaited
        self.stack = stack
        self.index = 0

    async def advance(self):
        while True:
            if self.inner is not None:
                result = await self.inner.pull()
                if not result.done:
                    return result
                self.inner = None

            result = await self.upstream.pull()
            if result.done:
                return result

            try:
                inner = call(self.f, result.value, self.index, self.with_index)
                if self.awaited:
                    inner = await inner
                inner = self.wrap(inner)
            except Exception as error:
                reraise_err(self.index, error, "AsyncFlatMapping", self.stack)

            self.inner = inner.cursor()

            self.index += 1

    async def release(self):
        inner, self.inner = self.inner, None
        try:
            if inner is not None:
                await inner.close()
        finally:
            await self.upstream.close()


class AsyncFlatMapping(AsyncDerived):
    def __init__(self, sequence, f, with_index=False, awaited=False,
                 stack=None):
        check_callable(f)
        super().__init__(sequence)
        self.f = f
        self.with_index = with_index
        self.awaited = awaited
        self.stack = stack
        self.wrap = as_async_sequence

    def cursor(self):
        return AsyncFlatMappingCursor(
            self.sequence.cursor(), self.f, self.with_index, self.awaited,
            self.stack, self.wrap)


@singledispatch
def flat_map(source, f, with_index=False):
    """Map each value to a sequence and concatenate the results.

    Each inner sequence is exhausted before the next value of `source`
    is pulled. Closing the result closes the current inner cursor, then
    the source cursor.

    Args:
        source (Iterable or AsyncIterable): The input sequence.
        f (Callable): Returns an iterable for each value. With an
            asynchronous source, `f` may return synchronous or
            asynchronous iterables.
        with_index (bool): wether `f` also receives the zero-based
            index of the value (default False).

    Example:

        >>> list(lazyseq.flat_map([1, 2], lambda x: [x, x * 10]))
        [1, 10, 2, 20]
    """
    return FlatMapping(as_sequence(source), f, with_index, format_stack())


@flat_map.register(AsyncIterable)
def _(source, f, with_index=False):
    return AsyncFlatMapping(as_async_sequence(source), f, with_index,
                            stack=format_stack())


def flat_map_async(source, f, with_index=False):
    """Flat map with a coroutine function returning the inner sequences."""
    return AsyncFlatMapping(as_async_sequence(source), f, with_index,
                            awaited=True, stack=format_stack())


def identity(x):
    return x


class StoredInners(object):
    """Wraps the inner values stored in a re-iterable outer sequence.

    Single-use inner values (iterators, generators) are wrapped once and
    the wrapper is reused by later traversals, which then fail with
    :class:`lazyseq.SequenceConsumedError` instead of silently skipping
    them.
    """

    def __init__(self, outer, wrap):
        self.outer = outer
        self.wrap = wrap
        self.single_use = {}

    def __call__(self, value):
        if not self.outer.reiterable:
            return self.wrap(value)

        entry = self.single_use.get(id(value))
        if entry is None:
            inner = self.wrap(value)
            if inner.reiterable:
                return inner
            # keep value alive so that its id is not reused
            entry = self.single_use[id(value)] = (value, inner)
        return entry[1]


class Concatenation(FlatMapping):
    def __init__(self, sequence, stack=None):
        super().__init__(sequence, identity, stack=stack)
        self.wrap = StoredInners(sequence, as_sequence)

    @property
    def reiterable(self):
        return self.sequence.reiterable and not self.wrap.single_use


class AsyncConcatenation(AsyncFlatMapping):
    def __init__(self, sequence, stack=None):
        super().__init__(sequence, identity, stack=stack)
        self.wrap = StoredInners(sequence, as_async_sequence)

    @property
    def reiterable(self):
        return self.sequence.reiterable and not self.wrap.single_use


@singledispatch
def concatenate(sequences):
    """Return the concatenation of a sequence of sequences.

    The result is re-iterable as long as the outer sequence is and no
    single-use inner sequence was met during a traversal.

    Example:

        >>> data1 = [0, 1, 2, 3]
        >>> data2 = [4, 5]
        >>> data3 = [6, 7, 8, 9, 10, 11]
        >>> list(lazyseq.concatenate([data1, data2, data3]))
        [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11]
    """
    return Concatenation(as_sequence(sequences), format_stack())


@concatenate.register(AsyncIterable)
def _(sequences):
    return AsyncConcatenation(as_async_sequence(sequences), format_stack())
