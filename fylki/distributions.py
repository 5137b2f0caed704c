"""
Random distributions used to fill matrices
(see :py:meth:`~fylki.linalg.DenseMatrix.random`).

A distribution is anything with a ``sample()`` method returning one number.
There are two capability variants, continuous (returning a float)
and discrete (returning an integer); matrices are filled the same way in both cases.

The distributions below wrap ``numpy.random.Generator``.
Since a generator is not thread-safe, every distribution guards it with a lock,
so that one object can be shared by the tasks of a parallel fill.
The values are still reproducible for a given ``seed``,
but their placement in the matrix depends on the task scheduling
unless the fill runs on a single thread.


.. autoclass:: ContinuousDistribution
    :members:

.. autoclass:: DiscreteDistribution
    :members:
"""

import threading

import numpy


class _GeneratorSampler:

    def __init__(self, seed: int | None = None):
        self._rng = numpy.random.default_rng(seed)
        self._lock = threading.Lock()


class ContinuousDistribution(_GeneratorSampler):
    """The base class for distributions of real numbers."""

    def sample(self) -> float:
        """Returns one random number."""
        with self._lock:
            return float(self._draw())

    def _draw(self) -> float:
        raise NotImplementedError()


class DiscreteDistribution(_GeneratorSampler):
    """The base class for distributions of integer numbers."""

    def sample(self) -> int:
        """Returns one random number."""
        with self._lock:
            return int(self._draw())

    def _draw(self) -> int:
        raise NotImplementedError()


class ContinuousUniform(ContinuousDistribution):
    """
    Uniformly distributed floating-points numbers in the interval ``[low, high)``.
    """

    def __init__(self, low: float = 0, high: float = 1, seed: int | None = None):
        if not low < high:
            raise ValueError(f"Expected low < high, got [{low}, {high})")
        super().__init__(seed)
        self.low = low
        self.high = high

    def _draw(self) -> float:
        return self._rng.uniform(self.low, self.high)


class Normal(ContinuousDistribution):
    """
    Normally distributed random numbers with the mean ``mean`` and
    the standard deviation ``std``.
    """

    def __init__(self, mean: float = 0, std: float = 1, seed: int | None = None):
        if std < 0:
            raise ValueError(f"The standard deviation must be non-negative, got {std}")
        super().__init__(seed)
        self.mean = mean
        self.std = std

    def _draw(self) -> float:
        return self._rng.normal(self.mean, self.std)


class Gamma(ContinuousDistribution):
    """
    Random numbers from the gamma distribution

    .. math::
      P(x) = x^{k-1} \\frac{e^{-x/\\theta}}{\\theta^k \\Gamma(k)},

    where :math:`k` is ``shape``, and :math:`\\theta` is ``scale``.
    """

    def __init__(self, shape: float = 1, scale: float = 1, seed: int | None = None):
        if shape <= 0 or scale <= 0:
            raise ValueError(f"Shape and scale must be positive, got {shape} and {scale}")
        super().__init__(seed)
        self.shape = shape
        self.scale = scale

    def _draw(self) -> float:
        return self._rng.gamma(self.shape, self.scale)


class DiscreteUniform(DiscreteDistribution):
    """
    Uniformly distributed integer numbers in the interval ``[low, high)``.
    If ``high`` is ``None``, the interval is ``[0, low)``.
    """

    def __init__(self, low: int, high: int | None = None, seed: int | None = None):
        if high is None:
            low, high = 0, low
        if not low < high:
            raise ValueError(f"Expected low < high, got [{low}, {high})")
        super().__init__(seed)
        self.low = low
        self.high = high

    def _draw(self) -> int:
        return self._rng.integers(self.low, self.high)


class Bernoulli(DiscreteDistribution):
    """Returns ``1`` with probability ``p`` and ``0`` otherwise."""

    def __init__(self, p: float = 0.5, seed: int | None = None):
        if not 0 <= p <= 1:
            raise ValueError(f"The probability must lie in [0, 1], got {p}")
        super().__init__(seed)
        self.p = p

    def _draw(self) -> int:
        return 1 if self._rng.random() < self.p else 0
