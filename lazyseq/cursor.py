"""Synchronous pull protocol: cursors, sequences and source adapters."""

from collections.abc import Iterable, Iterator

from .chaining import chain
from .errors import CursorBusyError, SequenceConsumedError
from .result import DONE, Result
from .utils import get_logger

logger = get_logger(__name__)


READY = "ready"
YIELDING = "yielding"
TERMINAL = "terminal"


class Cursor(object):
    """Single-owner handle over one traversal of a sequence.

    A cursor is either ready to be pulled, in the middle of a pull
    (yielding) or terminal. Terminal is absorbing: pulling a terminal
    cursor returns :data:`lazyseq.DONE` and closing it does nothing.

    Subclasses implement :meth:`advance` to compute the next
    :class:`lazyseq.Result` and :meth:`release` to free their resources.
    `release` is run exactly once, when the cursor becomes terminal,
    whether because the traversal ended, because :meth:`close` was
    called or because `advance` raised.
    """

    def __init__(self):
        self.state = READY

    @property
    def closed(self):
        return self.state == TERMINAL

    def advance(self):
        raise NotImplementedError

    def release(self):
        pass

    def pull(self):
        """Advance and return the next :class:`lazyseq.Result`."""
        if self.state == TERMINAL:
            return DONE
        if self.state == YIELDING:
            raise CursorBusyError(
                "{} is already being pulled".format(self.__class__.__name__))

        self.state = YIELDING
        try:
            result = self.advance()
        except BaseException:
            logger.debug("%s terminated by fault", self.__class__.__name__)
            self.terminate()
            raise

        if self.state == TERMINAL:  # closed during advance
            return DONE
        if result.done:
            self.terminate()
            return DONE

        self.state = READY
        return result

    def close(self):
        """Terminate the traversal early and release upstream resources."""
        self.terminate()

    def terminate(self):
        if self.state == TERMINAL:
            return
        self.state = TERMINAL
        self.release()

    def __iter__(self):
        return self

    def __next__(self):
        result = self.pull()
        if result.done:
            raise StopIteration
        return result.value

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __del__(self):
        if getattr(self, "state", TERMINAL) != TERMINAL:
            logger.debug("closing %s on deallocation", self.__class__.__name__)
            self.close()


class LayeredCursor(Cursor):
    """Cursor which owns exactly one upstream cursor."""

    def __init__(self, upstream):
        super().__init__()
        self.upstream = upstream

    def release(self):
        self.upstream.close()


class IterCursor(Cursor):
    """Cursor over a native python iterator."""

    def __init__(self, iterator):
        super().__init__()
        self.iterator = iterator

    def advance(self):
        try:
            return Result(next(self.iterator))
        except StopIteration:
            return DONE

    def release(self):
        close = getattr(self.iterator, "close", None)
        if close is not None:
            close()


class Sequence(object):
    """Anything that can produce a fresh :class:`Cursor` on demand."""

    reiterable = True

    def cursor(self):
        raise NotImplementedError

    def __iter__(self):
        return self.cursor()

    def chain(self, transform):
        """Return `transform(self)`, see :func:`lazyseq.chain`."""
        return chain(self, transform)


class Derived(Sequence):
    """Sequence defined on top of another one, shares its reiterability."""

    def __init__(self, sequence):
        self.sequence = sequence

    @property
    def reiterable(self):
        return self.sequence.reiterable


class IterableSequence(Sequence):
    def __init__(self, iterable):
        self.iterable = iterable

    def cursor(self):
        return IterCursor(iter(self.iterable))


class SingleUseSequence(Sequence):
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
        return IterCursor(self.iterator)


def as_sequence(source):
    """Return `source` as a :class:`Sequence`.

    Raises:
        TypeError: if `source` is not a synchronous iterable.
    """
    if isinstance(source, Sequence):
        return source
    elif isinstance(source, Iterator):
        return SingleUseSequence(source)
    elif isinstance(source, Iterable):
        return IterableSequence(source)
    elif hasattr(source, "__aiter__"):
        raise TypeError(
            "{} is asynchronous, use lazyseq.from_async".format(
                source.__class__.__name__))
    else:
        raise TypeError(
            "{} object is not iterable".format(source.__class__.__name__))


def from_iterable(source):
    """Wrap a python iterable into a lazy :class:`Sequence`.

    Containers such as lists, tuples, sets, dicts, ranges or arrays
    give a re-iterable sequence: every traversal starts from the
    beginning. Iterators and generators give a single-use sequence
    which refuses to start a second traversal.

    Example:

        >>> numbers = lazyseq.from_iterable([1, 2, 3])
        >>> list(numbers), list(numbers)
        ([1, 2, 3], [1, 2, 3])
        >>> once = lazyseq.from_iterable(x for x in range(3))
        >>> once.reiterable
        False
    """
    return as_sequence(source)


def of(*values):
    """Return a re-iterable sequence of the arguments.

    Example:

        >>> list(lazyseq.of('a', 'b', 'c'))
        ['a', 'b', 'c']
    """
    return IterableSequence(values)
