"""Terminal operations, which drain a sequence eagerly."""

from collections.abc import AsyncIterable
from functools import singledispatch

from .bridge import as_async_sequence
from .cursor import as_sequence
from .errors import format_stack, reraise_err
from .utils import MISSING, check_callable


def empty_reduce():
    return TypeError("reduce() of empty sequence with no initial value")


@singledispatch
def reduce(source, f, initial=MISSING):
    """Fold the values of a sequence into an accumulator.

    Equivalent to :func:`python:functools.reduce` over the pull
    protocol: the source is drained one value at a time, the source
    cursor is closed even when `f` fails. With an asynchronous source,
    a coroutine is returned which must be awaited, successive folds
    never overlap.

    Args:
        source (Iterable or AsyncIterable): The input sequence.
        f (Callable): Takes the accumulator and a value, returns the new
            accumulator.
        initial (Any): The initial accumulator value, defaults to the
            first value of the sequence.

    Raises:
        TypeError: if the sequence is empty and no `initial` is given.

    Example:

        >>> lazyseq.reduce([1, 2, 3, 4], lambda acc, x: acc + x, 10)
        20
    """
    check_callable(f)
    stack = format_stack()

    with as_sequence(source).cursor() as cursor:
        index = 0
        if initial is MISSING:
            first = cursor.pull()
            if first.done:
                raise empty_reduce()
            accumulator = first.value
            index += 1
        else:
            accumulator = initial

        for value in cursor:
            try:
                accumulator = f(accumulator, value)
            except Exception as error:
                reraise_err(index, error, "reduce", stack)
            index += 1

    return accumulator


@reduce.register(AsyncIterable)
def _(source, f, initial=MISSING):
    check_callable(f)
    return reduce_async(as_async_sequence(source), f, initial, format_stack())


async def reduce_async(sequence, f, initial, stack):
    async with sequence.cursor() as cursor:
        index = 0
        if initial is MISSING:
            first = await cursor.pull()
            if first.done:
                raise empty_reduce()
            accumulator = first.value
            index += 1
        else:
            accumulator = initial

        async for value in cursor:
            try:
                accumulator = f(accumulator, value)
            except Exception as error:
                reraise_err(index, error, "reduce", stack)
            index += 1

    return accumulator


@singledispatch
def to_list(source):
    """Drain a sequence into a list (a coroutine for async sources)."""
    with as_sequence(source).cursor() as cursor:
        return list(cursor)


@to_list.register(AsyncIterable)
def _(source):
    return to_list_async(as_async_sequence(source))


async def to_list_async(sequence):
    async with sequence.cursor() as cursor:
        return [value async for value in cursor]
