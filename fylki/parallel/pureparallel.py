import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, wait

from .. import helpers
from ..control import Control, control

logger = logging.getLogger(__name__)

_worker_state = threading.local()


def in_worker() -> bool:
    """Returns ``True`` if called from inside a task of a running parallel loop."""
    return getattr(_worker_state, "active", False)


def _run_chunk(task: Callable[[int], None], chunk: range) -> None:
    _worker_state.active = True
    try:
        for i in chunk:
            task(i)
    finally:
        _worker_state.active = False


class PureParallel:
    """
    A parallel loop over a range of independent indices
    (i.e. with no interaction between iterations).

    The range is split into at most ``max_degree_of_parallelism`` contiguous chunks,
    each of them processed sequentially by one task.
    Calling the object blocks until every task finishes;
    if any of them raised, the first exception (in chunk order) is re-raised.

    Nested loops (started from within a task) and loops shorter than
    ``parallelize_order`` are executed on the calling thread.

    :param start: the first index.
    :param stop: the index after the last one.
    :param settings: a :py:class:`~fylki.control.Control` object,
        the global one by default.
    """

    def __init__(self, start: int, stop: int, settings: Control | None = None):
        self._range = range(start, stop)
        self._settings = settings if settings is not None else control

    def chunks(self) -> list[range]:
        length = len(self._range)
        if length == 0:
            return []

        executor = self._settings.executor()
        if executor is None or in_worker() or length < self._settings.parallelize_order:
            return [self._range]

        return list(
            helpers.split_range(
                self._range.start, self._range.stop, self._settings.max_degree_of_parallelism
            )
        )

    def __call__(self, task: Callable[[int], None]) -> None:
        chunks = self.chunks()
        if len(chunks) == 0:
            return

        if len(chunks) == 1:
            for i in chunks[0]:
                task(i)
            return

        with self._settings.lease_executor() as executor:
            if executor is None:
                # The degree of parallelism was lowered concurrently.
                for chunk in chunks:
                    _run_chunk(task, chunk)
                return

            logger.debug("Running %d indices in %d tasks", len(self._range), len(chunks))
            futures: list[Future[None]] = [
                executor.submit(_run_chunk, task, chunk) for chunk in chunks
            ]
            wait(futures)
        for future in futures:
            future.result()


def parallel_for(
    start: int, stop: int, task: Callable[[int], None], settings: Control | None = None
) -> None:
    """Calls ``task(i)`` for every ``i`` in ``range(start, stop)``, possibly in parallel."""
    PureParallel(start, stop, settings=settings)(task)
