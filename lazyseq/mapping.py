from collections.abc import AsyncIterable
from functools import singledispatch

from .asynchronous import AsyncDerived, LayeredAsyncCursor
from .bridge import as_async_sequence
from .cursor import Derived, LayeredCursor, as_sequence
from .errors import format_stack, reraise_err
from .result import DONE, Result
from .utils import call, check_callable


class MappingCursor(LayeredCursor):
    def __init__(self, upstream, f, with_index, stack):
        super().__init__(upstream)
        self.f = f
        self.with_index = with_index
        self.stack = stack
        self.index = 0

    def advance(self):
        result = self.upstream.pull()
        if result.done:
            return DONE

        try:
            value = call(self.f, result.value, self.index, self.with_index)
        except Exception as error:
            reraise_err(self.index, error, "Mapping", self.stack)

        self.index += 1
        return Result(value)


class Mapping(Derived):
    def __init__(self, sequence, f, with_index=False, stack=None):
        check_callable(f)
        super().__init__(sequence)
        self.f = f
        self.with_index = with_index
        self.stack = stack

    def cursor(self):
        return MappingCursor(
            self.sequence.cursor(), self.f, self.with_index, self.stack)


class AsyncMappingCursor(LayeredAsyncCursor):
    def __init__(self, upstream, f, with_index, awaited, stack):
        super().__init__(upstream)
        self.f = f
        self.with_index = with_index
        self.awaited = awaited
        self.stack = stack
        self.index = 0

    async def advance(self):
        result = await self.upstream.pull()
        if result.done:
            return DONE

        try:
            value = call(self.f, result.value, self.index, self.with_index)
            if self.awaited:
                value = await value
        except Exception as error:
            reraise_err(self.index, error, "AsyncMapping", self.stack)

        self.index += 1
        return Result(value)


class AsyncMapping(AsyncDerived):
    def __init__(self, sequence, f, with_index=False, awaited=False,
                 stack=None):
        check_callable(f)
        super().__init__(sequence)
        self.f = f
        self.with_index = with_index
        self.awaited = awaited
        self.stack = stack

    def cursor(self):
        return AsyncMappingCursor(
            self.sequence.cursor(), self.f, self.with_index, self.awaited,
            self.stack)


@singledispatch
def map(source, f, with_index=False):
    """Return a lazy mapping of `f` over the sequence.

    Equivalent to :code:`(f(x) for x in source)` with on-demand
    evaluation: each pull on the mapping pulls exactly one value from
    the source. Asynchronous sources give an asynchronous mapping.

    Args:
        source (Iterable or AsyncIterable): The input sequence.
        f (Callable): The function to apply.
        with_index (bool): wether `f` also receives the zero-based
            index of the value (default False).

    Returns:
        Sequence or AsyncSequence: The mapped sequence, re-iterable iff
        `source` is.

    Example:

        >>> a = [1, 2, 3, 4]
        >>> m = lazyseq.map(a, lambda x: x + 2)
        >>> list(m)
        [3, 4, 5, 6]
        >>> def do(y, i):
        ...     print("computing item {}".format(i))
        ...     return y * 10
        ...
        >>> m = lazyseq.map(a, do, with_index=True)
        >>> list(m)
        computing item 0
        computing item 1
        computing item 2
        computing item 3
        [10, 20, 30, 40]
    """
    return Mapping(as_sequence(source), f, with_index, format_stack())


@map.register(AsyncIterable)
def _(source, f, with_index=False):
    return AsyncMapping(as_async_sequence(source), f, with_index,
                        stack=format_stack())


def map_async(source, f, with_index=False):
    """Map a coroutine function over a sequence.

    The returned asynchronous sequence awaits `f` on each value before
    pulling the next one. Synchronous sources are bridged with
    :func:`lazyseq.from_async`.
    """
    return AsyncMapping(as_async_sequence(source), f, with_index,
                        awaited=True, stack=format_stack())


def starmap(source, f):
    """Map a function over a sequence of argument tuples.

    A lazy equivalent of :func:`python:itertools.starmap`.
    """
    check_callable(f)
    return map(source, lambda x: f(*x))
