"""Asynchronous pull protocol.

Mirrors :mod:`lazyseq.cursor`, except that pulling and closing are
coroutines. The only suspension points are the awaited
:meth:`AsyncCursor.pull` and :meth:`AsyncCursor.close` calls.
"""

import asyncio
from collections.abc import AsyncIterable, AsyncIterator

from .chaining import chain
from .cursor import READY, TERMINAL, YIELDING
from .errors import CursorBusyError, SequenceConsumedError
from .result import DONE, Result
from .utils import get_logger

logger = get_logger(__name__)


class AsyncCursor(object):
    """Asynchronous counterpart of :class:`lazyseq.Cursor`.

    Subclasses implement the :meth:`advance` and :meth:`release`
    coroutines. Cancelling a task suspended in :meth:`pull` terminates
    the cursor as a fault would.
    """

    def __init__(self):
        self.state = READY

    @property
    def closed(self):
        return self.state == TERMINAL

    async def advance(self):
        raise NotImplementedError

    async def release(self):
        pass

    async def pull(self):
        if self.state == TERMINAL:
            return DONE
        if self.state == YIELDING:
            raise CursorBusyError(
                "{} is already being pulled".format(self.__class__.__name__))

        self.state = YIELDING
        try:
            result = await self.advance()
        except BaseException:
            logger.debug("%s terminated by fault", self.__class__.__name__)
            await self.terminate()
            raise

        if self.state == TERMINAL:  # closed while the pull was in flight
            return DONE
        if result.done:
            await self.terminate()
            return DONE

        self.state = READY
        return result

    async def close(self):
        await self.terminate()

    aclose = close

    async def terminate(self):
        if self.state == TERMINAL:
            return
        self.state = TERMINAL
        await self.release()

    def __aiter__(self):
        return self

    async def __anext__(self):
        result = await self.pull()
        if result.done:
            raise StopAsyncIteration
        return result.value

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()


class LayeredAsyncCursor(AsyncCursor):
    def __init__(self, upstream):
        super().__init__()
        self.upstream = upstream

    async def release(self):
        await self.upstream.close()


class AsyncIterCursor(AsyncCursor):
    """Cursor over a native asynchronous iterator."""

    def __init__(self, iterator):
        super().__init__()
        self.iterator = iterator
        self.in_flight = False
        self.idle = None

    async def advance(self):
        self.in_flight = True
        self.idle = asyncio.Event()
        try:
            return Result(await self.iterator.__anext__())
        except StopAsyncIteration:
            return DONE
        finally:
            self.in_flight = False
            self.idle.set()

    async def release(self):
        if self.in_flight:
            # an async generator cannot be closed while it is running
            await self.idle.wait()
        await self.close_iterator()

    async def close_iterator(self):
        aclose = getattr(self.iterator, "aclose", None)
        if aclose is not None:
            await aclose()


class AsyncSequence(object):
    """Anything that can produce a fresh :class:`AsyncCursor` on demand."""

    reiterable = True

    def cursor(self):
        raise NotImplementedError

    def __aiter__(self):
        return self.cursor()

    def chain(self, transform):
        """Return `transform(self)`, see :func:`lazyseq.chain`."""
        return chain(self, transform)


class AsyncDerived(AsyncSequence):
    def __init__(self, sequence):
        self.sequence = sequence

    @property
    def reiterable(self):
        return self.sequence.reiterable


class AsyncIterableSequence(AsyncSequence):
    def __init__(self, iterable):
        self.iterable = iterable

    def cursor(self):
        return AsyncIterCursor(self.iterable.__aiter__())


class SingleUseAsyncSequence(AsyncSequence):
    reiterable = False

    def __init__(self, iterator):
        self.iterator = iterator
        self.consumed = False

    def cursor(self):
        if self.consumed:
            raise SequenceConsumedError(
                "single-use sequence over {} was already iterated".format(
                    self.iterator.__class__.__name__))
        self.consumed = True
        return AsyncIterCursor(self.iterator)


def as_native_async_sequence(source):
    """Wrap an object of the asynchronous protocol, or return None."""
    if isinstance(source, AsyncSequence):
        return source
    elif isinstance(source, AsyncIterator):
        return SingleUseAsyncSequence(source)
    elif isinstance(source, AsyncIterable):
        return AsyncIterableSequence(source)
    else:
        return None
