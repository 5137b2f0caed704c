import functools
import logging
from collections.abc import Callable
from concurrent.futures import wait
from typing import Any

from .predicates import Predicate, predicate_sum
from .pureparallel import PureParallel, _worker_state
from ..control import Control, control

logger = logging.getLogger(__name__)


class Reduce:
    """
    Reduces the values ``selector(i)`` for ``i`` in ``range(start, stop)``
    using given binary operation.

    Using algorithm cascading: every task reduces its own chunk of the range sequentially,
    and then the partial results are joined on the calling thread.
    Since the chunking depends on the degree of parallelism,
    for floating-point operations the last bits of the result
    may differ between runs with different settings.

    :param start: the first index.
    :param stop: the index after the last one.
    :param predicate: a :py:class:`~fylki.parallel.Predicate` object.
    :param settings: a :py:class:`~fylki.control.Control` object,
        the global one by default.
    """

    def __init__(
        self, start: int, stop: int, predicate: Predicate, settings: Control | None = None
    ):
        self._loop = PureParallel(start, stop, settings=settings)
        self._predicate = predicate
        self._settings = settings if settings is not None else control

    def _reduce_chunk(self, selector: Callable[[int], Any], chunk: range) -> Any:
        _worker_state.active = True
        try:
            return functools.reduce(
                self._predicate.operation, (selector(i) for i in chunk), self._predicate.empty
            )
        finally:
            _worker_state.active = False

    def _reduce_sequentially(self, selector: Callable[[int], Any], chunks: list[range]) -> list[Any]:
        return [
            functools.reduce(
                self._predicate.operation, (selector(i) for i in chunk), self._predicate.empty
            )
            for chunk in chunks
        ]

    def __call__(self, selector: Callable[[int], Any]) -> Any:
        chunks = self._loop.chunks()

        if len(chunks) <= 1:
            partials = self._reduce_sequentially(selector, chunks)
        else:
            with self._settings.lease_executor() as executor:
                if executor is None:
                    partials = self._reduce_sequentially(selector, chunks)
                else:
                    logger.debug("Reducing in %d tasks", len(chunks))
                    futures = [
                        executor.submit(self._reduce_chunk, selector, chunk) for chunk in chunks
                    ]
                    wait(futures)
                    partials = [future.result() for future in futures]

        return functools.reduce(self._predicate.operation, partials, self._predicate.empty)


def aggregate(
    start: int,
    stop: int,
    selector: Callable[[int], Any],
    predicate: Predicate | None = None,
    settings: Control | None = None,
) -> Any:
    """
    Reduces ``selector(i)`` over ``range(start, stop)``, possibly in parallel.
    Sums the values if ``predicate`` is not given.
    """
    if predicate is None:
        predicate = predicate_sum()
    return Reduce(start, stop, predicate, settings=settings)(selector)
