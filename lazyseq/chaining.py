from .utils import check_callable


def chain(source, transform):
    """Apply a sequence transformation.

    `chain` lets a small set of free operator functions be composed in
    a fluent style: it simply returns `transform(source)` and adds no
    buffering or state of its own, so laziness and cleanup of the
    result are those of `transform`.

    Args:
        source (Sequence or AsyncSequence): The input sequence.
        transform (Callable): A function taking the input sequence and
            returning a new sequence.

    Returns:
        The return value of `transform`.

    Example:

        >>> from functools import partial
        >>> evens = partial(lazyseq.filter, predicate=lambda x: x % 2 == 0)
        >>> doubled = partial(lazyseq.map, f=lambda x: x * 2)
        >>> list(lazyseq.of(1, 2, 3, 4).chain(evens).chain(doubled))
        [4, 8]
    """
    check_callable(transform, "transform")
    return transform(source)
