import functools

import pytest

from fylki import Control
from fylki.parallel import Predicate, Reduce, aggregate, predicate_max, predicate_sum


@pytest.fixture(params=[1, 4], ids=["st", "mt"])
def pool(request):
    settings = Control(max_degree_of_parallelism=request.param, parallelize_order=1)
    yield settings
    settings.shutdown()


@pytest.mark.parametrize("length", [1, 2, 13, 1535])
def test_sum(pool, length):
    assert aggregate(0, length, lambda i: i, settings=pool) == length * (length - 1) // 2


def test_max(pool):
    values = [3.0, 8.5, 1.0, 8.0, 0.5, 2.0]
    assert aggregate(0, len(values), values.__getitem__, predicate_max(), settings=pool) == 8.5


def test_empty_range(pool):
    assert aggregate(5, 5, lambda i: 1 / 0, settings=pool) == 0.0
    assert aggregate(0, 0, lambda i: 1 / 0, predicate_max(), settings=pool) == 0.0


def test_nondefault_predicate(pool):
    predicate = Predicate(lambda v1, v2: v1 * v2, 1)
    rd = Reduce(1, 11, predicate, settings=pool)
    assert rd(lambda i: i) == functools.reduce(lambda x, y: x * y, range(1, 11))


def test_selector_called_once(pool):
    calls = []

    def selector(i):
        calls.append(i)
        return 1.0

    assert aggregate(0, 100, selector, predicate_sum(), settings=pool) == 100.0
    assert sorted(calls) == list(range(100))


def test_exception(pool):
    def selector(i):
        if i == 3:
            raise KeyError(i)
        return i

    with pytest.raises(KeyError):
        aggregate(0, 10, selector, settings=pool)
