import inspect
import threading


class EvaluationError(Exception):
    """Raised when evaluating an element fails."""


class CursorBusyError(RuntimeError):
    """Raised when a cursor is pulled while a pull on it is in progress."""


class SequenceConsumedError(RuntimeError):
    """Raised when a single-use sequence is asked for a second cursor."""


# Settings --------------------------------------------------------------------

def seterr(evaluation=None):
    """Set how errors are handled.

    Args:
        evaluation (str): how errors from user callbacks triggered by
            operators are propagated:

            - `'wrap'`: raise :class:`EvaluationError` with original error as
              its cause.
            - `'passthrough'`: let the error propagate through lazyseq code,
              might facilitate step-by-step debugging.
            - `None` leave unchanged and return current setting
    Returns:
        The setting value.
    """
    if evaluation == 'wrap':
        error_config.passthrough = False
    elif evaluation == 'passthrough':
        error_config.passthrough = True
    elif evaluation is not None:
        raise ValueError("evaluation must be 'wrap' or 'passthrough'")

    return "passthrough" if error_config.passthrough else 'wrap'


class ErrorConfig(threading.local):
    def __init__(self):
        super().__init__()
        self.passthrough = False


error_config = ErrorConfig()


def reraise_err(item, error, owner, stack_desc=None):
    """(re)Raise a callback error with contextual debug info.

    Must be called while `error` is being handled.
    """
    if seterr() == "passthrough" or isinstance(error, EvaluationError):
        raise error

    msg = "Failed to evaluate item {} in {}".format(item, owner)
    if stack_desc:
        msg += " created at:\n{}".format(stack_desc)

    raise EvaluationError(msg) from error


# Helpers ---------------------------------------------------------------------

def unindent(lines):
    if lines is None:
        return []

    prefix = lines[0]
    while len(prefix) > 0 and not prefix.isspace():
        prefix = prefix[:-1]

    for line in lines[1:]:
        while not line.startswith(prefix):
            prefix = prefix[:-1]

    return [line[len(prefix):] for line in lines]


def format_stack(skip=1):
    out = ""
    for frame in inspect.stack()[:skip:-1]:
        _, filename, lineno, function, code_context, _ = frame
        out += "  File \"{}\", line {}, in {}\n".format(
            filename, lineno, function)
        for line in unindent(code_context):
            out += "    " + line

    return out
