"""Vectors: the generic contract and the dense representation."""

from collections.abc import Iterable, Iterator
from typing import Any

import numpy
from numpy.typing import ArrayLike, NDArray

from ..errors import DimensionMismatch, check_non_negative


class Vector:
    """
    The base class for vectors of real numbers.
    Subclasses implement :py:meth:`at` and :py:meth:`create_vector`,
    everything else is defined in terms of these.
    """

    def __init__(self, count: int):
        check_non_negative(count, "count")
        self._count = count

    @property
    def count(self) -> int:
        """The number of elements."""
        return self._count

    def __len__(self) -> int:
        return self._count

    def as_dense_buffer(self) -> NDArray[numpy.float64] | None:
        """Returns the underlying buffer if the vector has the dense representation."""
        return None

    def at(self, index: int, value: float | None = None) -> float | None:
        """
        If ``value`` is ``None``, returns the element at ``index``,
        otherwise sets it to ``value``. Does not check the index.
        """
        raise NotImplementedError()

    def create_vector(self, count: int) -> "Vector":
        """Creates a zero vector of the same representation."""
        raise NotImplementedError()

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._count:
            raise IndexError(f"Index {index} is out of range for a vector of size {self._count}")

    def __getitem__(self, index: int) -> float:
        self._check_index(index)
        return self.at(index)  # type: ignore[return-value]

    def __setitem__(self, index: int, value: float) -> None:
        self._check_index(index)
        self.at(index, float(value))

    def __iter__(self) -> Iterator[float]:
        for i in range(self._count):
            yield self.at(i)  # type: ignore[misc]

    def to_array(self) -> NDArray[numpy.float64]:
        """Returns a copy of the contents as a numpy array."""
        return numpy.array([self.at(i) for i in range(self._count)], numpy.float64)

    def check_count(self, count: int) -> None:
        if self._count != count:
            raise DimensionMismatch(f"Expected a vector of size {count}, got {self._count}")

    def __mul__(self, other: Any) -> "Vector":
        from .matrix import Matrix

        if isinstance(other, Matrix):
            return other.left_multiply(self)
        return NotImplemented

    __matmul__ = __mul__

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_array().tolist()!r})"


class DenseVector(Vector):
    """
    A vector backed by a contiguous ``float64`` buffer.

    :param count: the number of elements (all set to zero).
    """

    def __init__(self, count: int):
        super().__init__(count)
        self._data = numpy.zeros(count, numpy.float64)

    @classmethod
    def from_array(cls, values: ArrayLike | Iterable[float]) -> "DenseVector":
        """Creates a vector with a copy of ``values``."""
        data = numpy.array(values, numpy.float64)
        if data.ndim != 1:
            raise DimensionMismatch(f"Expected a one-dimensional array, got shape {data.shape}")
        vector = cls(0)
        vector._count = data.size
        vector._data = data
        return vector

    @property
    def buffer(self) -> NDArray[numpy.float64]:
        """The underlying buffer (not a copy)."""
        return self._data

    def as_dense_buffer(self) -> NDArray[numpy.float64]:
        return self._data

    def at(self, index: int, value: float | None = None) -> float | None:
        if value is None:
            return float(self._data[index])
        self._data[index] = value
        return None

    def create_vector(self, count: int) -> "DenseVector":
        return DenseVector(count)

    def to_array(self) -> NDArray[numpy.float64]:
        return self._data.copy()
