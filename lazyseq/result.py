"""The envelope returned by every cursor pull."""

from tblib import pickling_support


class Result(object):
    """Outcome of a pull.

    Either a value (`done` is false), or the end of the traversal
    (`done` is true). A terminal result may also carry the exception
    that ended the traversal, see :func:`lazyseq.materialize`.

    Args:
        value (Any): the pulled value.
        done (bool): wether the traversal is over.
        fault (Optional[BaseException]): the exception which terminated
            the traversal, implies `done`.
    """

    def __init__(self, value=None, done=False, fault=None):
        if fault is not None:
            done = True
            # keep the traceback when results are pickled
            pickling_support.install(fault)
        if done and value is not None:
            raise ValueError("a terminal result cannot hold a value")

        self.value = value
        self.done = done
        self.fault = fault

    @classmethod
    def of(cls, value):
        return cls(value)

    @classmethod
    def failed(cls, fault):
        if not isinstance(fault, BaseException):
            raise TypeError("fault must be an exception")
        return cls(fault=fault)

    @property
    def faulted(self):
        return self.fault is not None

    def unwrap(self):
        """Return the value or raise the fault carried by this result."""
        if self.fault is not None:
            raise self.fault
        if self.done:
            raise ValueError("cannot unwrap a terminal result")
        return self.value

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return (self.done, self.value, self.fault) \
            == (other.done, other.value, other.fault)

    def __hash__(self):
        return hash((self.done, id(self.fault)))

    def __repr__(self):
        if self.fault is not None:
            return "Result(fault={!r})".format(self.fault)
        elif self.done:
            return "Result(done=True)"
        else:
            return "Result({!r})".format(self.value)


DONE = Result(done=True)
