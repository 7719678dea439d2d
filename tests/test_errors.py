import pytest
from lazyseq import EvaluationError, map, seterr
from lazyseq.errors import format_stack


def test_seterr():
    assert seterr() == 'wrap'
    assert seterr('passthrough') == 'passthrough'
    assert seterr() == 'passthrough'
    assert seterr('wrap') == 'wrap'

    with pytest.raises(ValueError):
        seterr('ignore')


def test_format_stack():
    def inner():
        return format_stack()

    stack = inner()
    assert "test_format_stack" in stack
    assert "inner" not in stack.splitlines()[-2]


def test_error_reports_creation_site():
    def make_pipeline():
        return map([1], lambda x: 1 / 0)

    pipeline = make_pipeline()

    with pytest.raises(EvaluationError) as excinfo:
        list(pipeline)

    assert "make_pipeline" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ZeroDivisionError)
