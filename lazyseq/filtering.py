from collections.abc import AsyncIterable
from functools import singledispatch

from .asynchronous import AsyncDerived, LayeredAsyncCursor
from .bridge import as_async_sequence
from .cursor import Derived, LayeredCursor, as_sequence
from .errors import format_stack, reraise_err
from .result import DONE
from .utils import call, check_callable


class FilteringCursor(LayeredCursor):
    def __init__(self, upstream, predicate, with_index, stack):
        super().__init__(upstream)
        self.predicate = predicate
        self.with_index = with_index
        self.stack = stack
        self.index = 0

    def advance(self):
        while True:
            result = self.upstream.pull()
            if result.done:
                return DONE

            try:
                keep = call(self.predicate, result.value, self.index,
                            self.with_index)
            except Exception as error:
                reraise_err(self.index, error, "Filtering", self.stack)

            self.index += 1
            if keep:
                return result


class Filtering(Derived):
    def __init__(self, sequence, predicate, with_index=False, stack=None):
        check_callable(predicate, "predicate")
        super().__init__(sequence)
        self.predicate = predicate
        self.with_index = with_index
        self.stack = stack

    def cursor(self):
        return FilteringCursor(
            self.sequence.cursor(), self.predicate, self.with_index,
            self.stack)


class AsyncFilteringCursor(LayeredAsyncCursor):
    def __init__(self, upstream, predicate, with_index, awaited, stack):
        super().__init__(upstream)
        self.predicate = predicate
        self.with_index = with_index
        self.awaited = awaited
        self.stack = stack
        self.index = 0

    async def advance(self):
        while True:
            result = await self.upstream.pull()
            if result.done:
                return DONE

            try:
                keep = call(self.predicate, result.value, self.index,
                            self.with_index)
                if self.awaited:
                    keep = await keep
            except Exception as error:
                reraise_err(self.index, error, "AsyncFiltering", self.stack)

            self.index += 1
            if keep:
                return result


class AsyncFiltering(AsyncDerived):
    def __init__(self, sequence, predicate, with_index=False, awaited=False,
                 stack=None):
        check_callable(predicate, "predicate")
        super().__init__(sequence)
        self.predicate = predicate
        self.with_index = with_index
        self.awaited = awaited
        self.stack = stack

    def cursor(self):
        return AsyncFilteringCursor(
            self.sequence.cursor(), self.predicate, self.with_index,
            self.awaited, self.stack)


@singledispatch
def filter(source, predicate, with_index=False):
    """Return the values of a sequence which satisfy a predicate.

    Relative order is preserved. Every rejected value causes exactly one
    more pull on the source, and only the value being tested is held at
    any time.

    Args:
        source (Iterable or AsyncIterable): The input sequence.
        predicate (Callable): Returns wether a value should be kept.
        with_index (bool): wether `predicate` also receives the
            zero-based index of the value in `source` (default False).

    Example:

        >>> list(lazyseq.filter(range(10), lambda x: x % 3 == 0))
        [0, 3, 6, 9]
    """
    return Filtering(as_sequence(source), predicate, with_index,
                     format_stack())


@filter.register(AsyncIterable)
def _(source, predicate, with_index=False):
    return AsyncFiltering(as_async_sequence(source), predicate, with_index,
                          stack=format_stack())


def filter_async(source, predicate, with_index=False):
    """Filter a sequence with a coroutine function predicate."""
    return AsyncFiltering(as_async_sequence(source), predicate, with_index,
                          awaited=True, stack=format_stack())
