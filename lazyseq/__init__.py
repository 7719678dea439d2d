"""
A python library to build and compose lazy sequences.

The lazyseq package defines a pull protocol shared by synchronous and
asynchronous sequences, and operators (map, filter, flat_map...) which
transform one lazy sequence into another.

Operators perform no work when they are created: values are computed
one at a time when the consumer pulls them, and stopping early (or
failing) releases every cursor of the chain down to the original
source exactly once.
Every operator accepts regular python iterables and asynchronous
iterables alike, the latter giving asynchronous sequences that can be
consumed with :code:`async for`.
"""

from . import instrument
from .asynchronous import AsyncCursor, AsyncSequence
from .bridge import from_async
from .chaining import chain
from .cursor import Cursor, Sequence, from_iterable, of
from .errors import (
    CursorBusyError,
    EvaluationError,
    SequenceConsumedError,
    seterr,
)
from .filtering import filter, filter_async
from .flattening import concatenate, flat_map, flat_map_async
from .mapping import map, map_async, starmap
from .materialization import dematerialize, materialize
from .reduction import reduce, to_list
from .result import DONE, Result
from .shape import batch, take

__all__ = [
    "Result",
    "DONE",
    "Cursor",
    "Sequence",
    "AsyncCursor",
    "AsyncSequence",
    "EvaluationError",
    "CursorBusyError",
    "SequenceConsumedError",
    "seterr",
    "from_iterable",
    "from_async",
    "of",
    "map",
    "map_async",
    "starmap",
    "filter",
    "filter_async",
    "flat_map",
    "flat_map_async",
    "concatenate",
    "reduce",
    "to_list",
    "chain",
    "take",
    "batch",
    "materialize",
    "dematerialize",
]
