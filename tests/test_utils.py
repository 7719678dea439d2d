import numpy as np
import pytest
from lazyseq.utils import MISSING, call, check_callable, check_positive, isint


def test_isint():
    assert isint(3)
    assert isint(np.int64(3))
    assert not isint(3.0)
    assert not isint("3")


def test_call():
    assert call(lambda x: x + 1, 1, 5, False) == 2
    assert call(lambda x, i: (x, i), 'a', 5, True) == ('a', 5)


def test_checks():
    check_callable(len)
    with pytest.raises(TypeError):
        check_callable(None)

    check_positive(0, "n")
    with pytest.raises(ValueError):
        check_positive(-1, "n")
    with pytest.raises(ValueError):
        check_positive(1.5, "n")

    assert repr(MISSING) == "<missing>"
