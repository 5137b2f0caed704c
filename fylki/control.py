"""
Runtime configuration of the library.

The settings live in a single :py:class:`Control` object, :py:data:`control`,
which is initialized from the environment on import:

* ``FYLKI_PROVIDER``: the identifier of the numeric backend (``numpy`` by default);
* ``FYLKI_NUM_THREADS``: the maximum degree of parallelism (the number of CPUs by default);
* ``FYLKI_PARALLELIZE_ORDER``: the minimum length of a range that is worth
  distributing over worker threads (``64`` by default).
"""

import contextlib
import logging
import os
import threading
from collections.abc import Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from .providers import LinearAlgebraProvider, get_provider, numpy_id

logger = logging.getLogger(__name__)

DEFAULT_PARALLELIZE_ORDER = 64


def _int_from_environment(environ: Mapping[str, str], name: str) -> int | None:
    value = environ.get(name)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


class Control:
    """
    Holds the numeric backend and the parallelization settings.

    :param provider: a :py:class:`~fylki.providers.LinearAlgebraProvider` object
        or a provider identifier. If ``None``, the numpy provider is used.
    :param max_degree_of_parallelism: the maximum number of tasks
        a parallel loop runs concurrently. If ``None``, the number of CPUs is used.
    :param parallelize_order: ranges shorter than this are processed
        on the calling thread.
    """

    def __init__(
        self,
        provider: LinearAlgebraProvider | str | None = None,
        max_degree_of_parallelism: int | None = None,
        parallelize_order: int | None = None,
    ):
        self._lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        # executor -> the number of parallel loops currently submitting to it
        self._leases: dict[ThreadPoolExecutor, int] = {}

        self._max_degree_of_parallelism = 1
        self._parallelize_order = DEFAULT_PARALLELIZE_ORDER

        self.provider = provider if provider is not None else numpy_id()
        self.max_degree_of_parallelism = (
            max_degree_of_parallelism
            if max_degree_of_parallelism is not None
            else (os.cpu_count() or 1)
        )
        if parallelize_order is not None:
            self.parallelize_order = parallelize_order

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> "Control":
        """Creates a :py:class:`Control` object using the ``FYLKI_*`` environment variables."""
        if environ is None:
            environ = os.environ
        return cls(
            provider=environ.get("FYLKI_PROVIDER") or None,
            max_degree_of_parallelism=_int_from_environment(environ, "FYLKI_NUM_THREADS"),
            parallelize_order=_int_from_environment(environ, "FYLKI_PARALLELIZE_ORDER"),
        )

    @property
    def provider(self) -> LinearAlgebraProvider:
        """The active numeric backend."""
        return self._provider

    @provider.setter
    def provider(self, provider: LinearAlgebraProvider | str) -> None:
        if isinstance(provider, str):
            provider = get_provider(provider)
        elif not isinstance(provider, LinearAlgebraProvider):
            raise TypeError(f"Expected a provider or a provider id, got {provider!r}")
        logger.debug("Using provider %r", provider)
        self._provider = provider

    @property
    def max_degree_of_parallelism(self) -> int:
        """The maximum number of worker threads used by a single parallel loop."""
        return self._max_degree_of_parallelism

    @max_degree_of_parallelism.setter
    def max_degree_of_parallelism(self, value: int) -> None:
        if value < 1:
            raise ValueError(f"The degree of parallelism must be positive, got {value}")
        with self._lock:
            if value == self._max_degree_of_parallelism:
                return
            self._max_degree_of_parallelism = value
            executor, self._executor = self._executor, None
            idle = executor is not None and executor not in self._leases
        # A leased executor is shut down by its last user, see lease_executor().
        if idle:
            logger.debug("Shutting down the executor to change the degree of parallelism")
            executor.shutdown(wait=True)

    @property
    def parallelize_order(self) -> int:
        """Ranges shorter than this value are not distributed over worker threads."""
        return self._parallelize_order

    @parallelize_order.setter
    def parallelize_order(self, value: int) -> None:
        if value < 1:
            raise ValueError(f"The parallelization order must be positive, got {value}")
        self._parallelize_order = value

    def _current_executor(self) -> ThreadPoolExecutor | None:
        # must be called with self._lock held
        if self._max_degree_of_parallelism == 1:
            return None
        if self._executor is None:
            logger.debug("Creating an executor with %d workers", self._max_degree_of_parallelism)
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_degree_of_parallelism, thread_name_prefix="fylki"
            )
        return self._executor

    def executor(self) -> ThreadPoolExecutor | None:
        """
        Returns the shared executor, creating it on first use,
        or ``None`` if only a single thread is allowed.
        The executor may be replaced at any moment by a change of settings;
        use :py:meth:`lease_executor` to submit tasks to it.
        """
        with self._lock:
            return self._current_executor()

    @contextlib.contextmanager
    def lease_executor(self) -> Iterator[ThreadPoolExecutor | None]:
        """
        A context manager yielding the shared executor (or ``None``, see :py:meth:`executor`).
        The executor accepts tasks until the block exits,
        even if the degree of parallelism is changed from another thread in the meantime;
        a replaced executor is shut down when its last lease is released.
        """
        with self._lock:
            executor = self._current_executor()
            if executor is not None:
                self._leases[executor] = self._leases.get(executor, 0) + 1
        try:
            yield executor
        finally:
            if executor is not None:
                with self._lock:
                    self._leases[executor] -= 1
                    released = self._leases[executor] == 0
                    if released:
                        del self._leases[executor]
                    retired = released and executor is not self._executor
                if retired:
                    logger.debug("Shutting down a replaced executor")
                    executor.shutdown(wait=False)

    def use_provider(self, provider: LinearAlgebraProvider | str) -> None:
        self.provider = provider

    def use_single_thread(self) -> None:
        self.max_degree_of_parallelism = 1

    def use_multiple_threads(self, num_threads: int | None = None) -> None:
        self.max_degree_of_parallelism = (
            num_threads if num_threads is not None else (os.cpu_count() or 1)
        )

    @contextlib.contextmanager
    def override(self, **settings: Any) -> Iterator["Control"]:
        """
        A context manager that temporarily changes any of ``provider``,
        ``max_degree_of_parallelism`` and ``parallelize_order``.
        """
        unknown = set(settings) - {"provider", "max_degree_of_parallelism", "parallelize_order"}
        if unknown:
            raise TypeError("Unknown settings: " + ", ".join(sorted(unknown)))

        saved = {name: getattr(self, name) for name in settings}
        try:
            for name, value in settings.items():
                setattr(self, name, value)
            yield self
        finally:
            for name, value in saved.items():
                setattr(self, name, value)

    def shutdown(self) -> None:
        """
        Shuts down the shared executor (a new one will be created when needed).
        If parallel loops are still running on it, it is shut down after they finish.
        """
        with self._lock:
            executor, self._executor = self._executor, None
            idle = executor is not None and executor not in self._leases
        if idle:
            executor.shutdown(wait=True)


control = Control.from_environment()
"""The global configuration object used by all matrix operations."""
