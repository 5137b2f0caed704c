from collections.abc import Callable
from typing import Any


class Predicate:
    """
    A predicate used in :py:class:`~fylki.parallel.Reduce`.

    :param operation: a callable with two parameters returning their combination.
        Must be associative and commutative, since partial results
        may be combined in any grouping.
    :param empty: the empty value of the argument
        (the one which, being joined by another argument, does not change it).
    """

    def __init__(self, operation: Callable[[Any, Any], Any], empty: Any):
        self.operation = operation
        self.empty = empty


def predicate_sum() -> Predicate:
    """Returns a :py:class:`~fylki.parallel.Predicate` object which sums its arguments."""
    return Predicate(lambda v1, v2: v1 + v2, 0.0)


def predicate_max() -> Predicate:
    """
    Returns a :py:class:`~fylki.parallel.Predicate` object which picks the largest argument.
    The empty value is ``0``, so it is only suitable for non-negative values (e.g. norms).
    """
    return Predicate(max, 0.0)
