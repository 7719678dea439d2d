"""Miscellaneous tools for internal use."""

import logging
import numbers
from logging import NullHandler


class Missing(object):
    def __repr__(self):
        return "<missing>"


MISSING = Missing()


def isint(x):
    """Return wether `x` is an integral number."""
    return isinstance(x, numbers.Integral)


def get_logger(name):
    logger = logging.getLogger(name)
    logger.addHandler(NullHandler())
    return logger


def check_callable(f, name="f"):
    if not callable(f):
        raise TypeError("{} must be callable".format(name))


def check_positive(n, name):
    if not isint(n) or n < 0:
        raise ValueError("{} must be a non-negative integer".format(name))


def call(f, value, index, with_index):
    """Invoke a user callback with or without the item index."""
    if with_index:
        return f(value, index)
    else:
        return f(value)
