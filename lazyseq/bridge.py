"""Conversion from the synchronous to the asynchronous protocol."""

import inspect

from .asynchronous import AsyncCursor, AsyncDerived, as_native_async_sequence
from .cursor import as_sequence
from .result import DONE, Result


class BridgeCursor(AsyncCursor):
    def __init__(self, upstream):
        super().__init__()
        self.upstream = upstream

    async def advance(self):
        result = self.upstream.pull()
        if result.done:
            return DONE

        value = result.value
        if inspect.isawaitable(value):
            value = await value

        return Result(value)

    async def release(self):
        self.upstream.close()


class AsyncBridge(AsyncDerived):
    """Asynchronous view of a synchronous sequence.

    Elements are delivered in source order. Awaitable elements are
    awaited one at a time before being delivered, no element is
    requested ahead of the one in flight.
    """

    def cursor(self):
        return BridgeCursor(self.sequence.cursor())


def as_async_sequence(source):
    """Return `source` as an :class:`lazyseq.AsyncSequence`.

    Raises:
        TypeError: if `source` is neither synchronously nor
            asynchronously iterable.
    """
    sequence = as_native_async_sequence(source)
    if sequence is None:
        sequence = AsyncBridge(as_sequence(source))
    return sequence


def from_async(source):
    """Make an asynchronous sequence.

    Args:
        source: Either an asynchronous iterable (such as an async
            generator or an :class:`lazyseq.AsyncSequence`), or a
            synchronous iterable or :class:`lazyseq.Sequence`, the
            elements of which may be awaitables.

    Returns:
        AsyncSequence: The asynchronous sequence, awaitable elements
        from synchronous sources are resolved one at a time, in order.

    Example:

        >>> async def delayed(x):
        ...     await asyncio.sleep(.01)
        ...     return x
        >>>
        >>> async def main():
        ...     values = lazyseq.from_async([delayed(1), 2, delayed(3)])
        ...     return await lazyseq.to_list(values)
        >>> asyncio.run(main())
        [1, 2, 3]
    """
    return as_async_sequence(source)
