"""Debugging tools."""

from collections.abc import AsyncIterable
from functools import singledispatch
from time import monotonic, perf_counter

from .asynchronous import AsyncDerived, LayeredAsyncCursor
from .bridge import as_async_sequence
from .cursor import Derived, LayeredCursor, as_sequence
from .utils import check_callable


class Tap(object):
    def __init__(self, func, max_calls, max_rate):
        self.func = func
        self.max_calls = max_calls
        self.max_rate = max_rate
        self.n_calls = 0
        self.last_call = monotonic()

    def silence(self):
        if self.max_calls is not None:
            if self.n_calls >= self.max_calls:
                return True

        if self.max_rate is not None:
            elapsed = monotonic() - self.last_call
            if elapsed < (1.0 / self.max_rate):
                return True

        return False

    def __call__(self, index, value):
        if not self.silence():
            self.func(index, value)
            self.last_call = monotonic()
            self.n_calls += 1


class DebugCursor(LayeredCursor):
    def __init__(self, upstream, tap):
        super().__init__(upstream)
        self.tap = tap
        self.index = 0

    def advance(self):
        result = self.upstream.pull()
        if not result.done:
            self.tap(self.index, result.value)
            self.index += 1
        return result


class Debug(Derived):
    def __init__(self, sequence, tap):
        super().__init__(sequence)
        self.tap = tap

    def cursor(self):
        return DebugCursor(self.sequence.cursor(), self.tap)


class AsyncDebugCursor(LayeredAsyncCursor):
    def __init__(self, upstream, tap):
        super().__init__(upstream)
        self.tap = tap
        self.index = 0

    async def advance(self):
        result = await self.upstream.pull()
        if not result.done:
            self.tap(self.index, result.value)
            self.index += 1
        return result


class AsyncDebug(AsyncDerived):
    def __init__(self, sequence, tap):
        super().__init__(sequence)
        self.tap = tap

    def cursor(self):
        return AsyncDebugCursor(self.sequence.cursor(), self.tap)


@singledispatch
def debug(sequence, func, max_calls=None, max_rate=None):
    """Wrap a sequence to trigger a function on each pulled value.

    Args:
        sequence (Iterable or AsyncIterable):
            Source sequence.
        func (Callable):
            A function to call whenever an item is pulled, must take the
            index and value of the items.
        max_calls (Optional[int]):
            An optional count limit on how many times `func` is invoked
            (default None).
        max_rate (Optional[int]):
            An optional rate limit to avoid spamming `func`.

    Returns:
        (Sequence): The wrapped sequence.

    Example:

        .. testsetup::

           from lazyseq.instrument import debug

        >>> sequence = [1, 2, 3, 4, 5]
        >>> watchthis = debug(sequence, lambda i, v: print(v), 2)
        >>> values = list(watchthis)
        1
        2
    """
    check_callable(func, "func")
    return Debug(as_sequence(sequence), Tap(func, max_calls, max_rate))


@debug.register(AsyncIterable)
def _(sequence, func, max_calls=None, max_rate=None):
    check_callable(func, "func")
    return AsyncDebug(as_async_sequence(sequence),
                      Tap(func, max_calls, max_rate))


class Statistics(object):
    def __init__(self):
        self.reset()

    def reset(self):
        """Reset counters."""
        self.n_cursors = 0
        self.n_pulls = 0
        self.n_values = 0
        self.n_releases = 0
        self.time_spent = 0

    def throughput(self):
        """Returns average measured throughput."""
        if self.n_pulls == 0:
            raise RuntimeError(
                "cannot measure throughput before any element was pulled")

        return self.n_pulls / self.time_spent

    def read_delay(self):
        """Return average measured time spent pulling items."""
        if self.n_pulls == 0:
            raise RuntimeError(
                "cannot measure read delay before any element was pulled")

        return self.time_spent / self.n_pulls


class MonitorCursor(LayeredCursor):
    def __init__(self, upstream, stats):
        super().__init__(upstream)
        self.stats = stats

    def advance(self):
        t_start = perf_counter()
        try:
            result = self.upstream.pull()
        finally:
            self.stats.time_spent += perf_counter() - t_start
            self.stats.n_pulls += 1

        if not result.done:
            self.stats.n_values += 1
        return result

    def release(self):
        self.stats.n_releases += 1
        super().release()


class Monitor(Derived, Statistics):
    def __init__(self, sequence):
        Derived.__init__(self, sequence)
        Statistics.__init__(self)

    def cursor(self):
        cursor = MonitorCursor(self.sequence.cursor(), self)
        self.n_cursors += 1
        return cursor


class AsyncMonitorCursor(LayeredAsyncCursor):
    def __init__(self, upstream, stats):
        super().__init__(upstream)
        self.stats = stats

    async def advance(self):
        t_start = perf_counter()
        try:
            result = await self.upstream.pull()
        finally:
            self.stats.time_spent += perf_counter() - t_start
            self.stats.n_pulls += 1

        if not result.done:
            self.stats.n_values += 1
        return result

    async def release(self):
        self.stats.n_releases += 1
        await super().release()


class AsyncMonitor(AsyncDerived, Statistics):
    def __init__(self, sequence):
        AsyncDerived.__init__(self, sequence)
        Statistics.__init__(self)

    def cursor(self):
        cursor = AsyncMonitorCursor(self.sequence.cursor(), self)
        self.n_cursors += 1
        return cursor


@singledispatch
def monitor(sequence):
    """Wrap a sequence to record how it is being pulled.

    The returned sequence exposes:

    * :code:`n_cursors`, :code:`n_pulls`, :code:`n_values` and
      :code:`n_releases`, the number of cursors created, of pulls, of
      pulls which returned a value and of cursors which released their
      resources.
    * :code:`read_delay()` the average time it takes to pull an item.
    * :code:`throughput()` the invert of the above.
    * :code:`reset()` resets the accumulated statistics.
    """
    return Monitor(as_sequence(sequence))


@monitor.register(AsyncIterable)
def _(sequence):
    return AsyncMonitor(as_async_sequence(sequence))
