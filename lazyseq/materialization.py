"""Conversion between pull outcomes and values."""

from collections.abc import AsyncIterable
from functools import singledispatch

from .asynchronous import AsyncDerived, LayeredAsyncCursor
from .bridge import as_async_sequence
from .cursor import Derived, LayeredCursor, as_sequence
from .result import DONE, Result


class MaterializeCursor(LayeredCursor):
    def __init__(self, upstream):
        super().__init__(upstream)
        self.ended = False

    def advance(self):
        if self.ended:
            return DONE

        try:
            outcome = self.upstream.pull()
        except Exception as error:
            outcome = Result.failed(error)

        self.ended = outcome.done
        return Result(outcome)


class Materialization(Derived):
    def cursor(self):
        return MaterializeCursor(self.sequence.cursor())


class AsyncMaterializeCursor(LayeredAsyncCursor):
    def __init__(self, upstream):
        super().__init__(upstream)
        self.ended = False

    async def advance(self):
        if self.ended:
            return DONE

        try:
            outcome = await self.upstream.pull()
        except Exception as error:
            outcome = Result.failed(error)

        self.ended = outcome.done
        return Result(outcome)


class AsyncMaterialization(AsyncDerived):
    def cursor(self):
        return AsyncMaterializeCursor(self.sequence.cursor())


@singledispatch
def materialize(source):
    """Return the outcomes of pulling a sequence as values.

    Every value `x` of `source` becomes `Result(x)`, the traversal ends
    with one terminal :class:`lazyseq.Result`: :data:`lazyseq.DONE`, or
    a faulted result if the source raised. The fault is therefore not
    raised to the consumer.

    Example:

        >>> def source():
        ...     yield 1
        ...     raise ValueError("oops")
        >>> list(lazyseq.materialize(source()))
        [Result(1), Result(fault=ValueError('oops'))]
    """
    return Materialization(as_sequence(source))


@materialize.register(AsyncIterable)
def _(source):
    return AsyncMaterialization(as_async_sequence(source))


class DematerializeCursor(LayeredCursor):
    def advance(self):
        result = self.upstream.pull()
        if result.done:
            return DONE
        if result.value.fault is not None:
            raise result.value.fault
        return result.value


class Dematerialization(Derived):
    def cursor(self):
        return DematerializeCursor(self.sequence.cursor())


class AsyncDematerializeCursor(LayeredAsyncCursor):
    async def advance(self):
        result = await self.upstream.pull()
        if result.done:
            return DONE
        if result.value.fault is not None:
            raise result.value.fault
        return result.value


class AsyncDematerialization(AsyncDerived):
    def cursor(self):
        return AsyncDematerializeCursor(self.sequence.cursor())


@singledispatch
def dematerialize(source):
    """Reverse :func:`materialize`: unwrap values and re-raise faults."""
    return Dematerialization(as_sequence(source))


@dematerialize.register(AsyncIterable)
def _(source):
    return AsyncDematerialization(as_async_sequence(source))
