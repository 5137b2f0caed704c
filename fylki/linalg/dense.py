import math
from typing import Any

import numpy
from numpy.typing import ArrayLike, NDArray

from ..control import control
from ..distributions import ContinuousDistribution, DiscreteDistribution
from ..errors import DimensionMismatch, NotSquare, check_positive
from ..parallel import aggregate, parallel_for, predicate_max
from .matrix import Matrix
from .vector import DenseVector, Vector


def _dense_buffers(*operands: Any) -> tuple[NDArray[numpy.float64], ...] | None:
    """
    Returns the buffers of ``operands`` if all of them have the dense representation,
    otherwise ``None``.
    """
    buffers = tuple(operand.as_dense_buffer() for operand in operands)
    if any(buffer is None for buffer in buffers):
        return None
    return buffers


class DenseMatrix(Matrix):
    """
    Bases: :py:class:`~fylki.linalg.Matrix`

    A matrix with dense storage: a single contiguous ``float64`` buffer of length
    ``rows * columns``, where the element ``(row, column)`` is stored
    at the offset ``column * rows + row`` (column-major order).
    Kernels traverse the buffer column-outer, row-inner wherever possible.

    Operations on dense operands (and a dense result) run directly on the buffers,
    distributing independent rows or columns over worker threads
    (see :py:mod:`fylki.parallel`); the result buffer must not overlap
    with the buffers of the operands, which the public methods guarantee
    by computing into a temporary matrix when necessary.
    Any other combination of representations is handled
    by the generic implementation of :py:class:`~fylki.linalg.Matrix`.

    :param rows: the number of rows.
    :param columns: the number of columns; if ``None``, the matrix is square.
    :param value: the value to assign to every element.
    """

    def __init__(self, rows: int, columns: int | None = None, value: float = 0.0):
        if columns is None:
            columns = rows
        super().__init__(rows, columns)
        if value == 0:
            self._data = numpy.zeros(rows * columns, numpy.float64)
        else:
            self._data = numpy.full(rows * columns, value, numpy.float64)

    @classmethod
    def of_buffer(cls, rows: int, columns: int, buffer: NDArray[numpy.float64]) -> "DenseMatrix":
        """
        Creates a matrix backed by ``buffer`` without copying it.
        The buffer must be a one-dimensional contiguous ``float64`` array
        of length ``rows * columns`` holding the elements in column-major order.

        The matrix takes ownership of the buffer:
        the caller must not keep modifying it through another reference.
        """
        if not isinstance(buffer, numpy.ndarray) or buffer.dtype != numpy.float64:
            raise TypeError("The buffer must be a numpy array of float64")
        if buffer.ndim != 1 or not buffer.flags.c_contiguous:
            raise ValueError("The buffer must be one-dimensional and contiguous")
        if buffer.size != rows * columns:
            raise DimensionMismatch(
                f"A {rows}x{columns} matrix needs a buffer of length {rows * columns}, "
                f"got {buffer.size}"
            )

        matrix = cls.__new__(cls)
        Matrix.__init__(matrix, rows, columns)
        matrix._data = buffer
        return matrix

    @classmethod
    def from_array(cls, array: ArrayLike) -> "DenseMatrix":
        """
        Creates a matrix with a copy of the two-dimensional (row-major) ``array``.
        """
        array = numpy.asarray(array, numpy.float64)
        if array.ndim != 2:
            raise DimensionMismatch(f"Expected a two-dimensional array, got shape {array.shape}")
        rows, columns = array.shape
        data = numpy.array(array, numpy.float64, order="F").ravel(order="F")
        return cls.of_buffer(rows, columns, data)

    @classmethod
    def identity(cls, order: int) -> "DenseMatrix":
        """
        Creates a square matrix with all zeros except for ones on the diagonal.
        Raises :py:class:`~fylki.errors.InvalidDimension` if ``order`` is less than one.
        """
        check_positive(order, "order")
        matrix = cls(order)
        matrix._data[:: order + 1] = 1.0
        return matrix

    @classmethod
    def random(
        cls,
        rows: int,
        columns: int,
        distribution: ContinuousDistribution | DiscreteDistribution,
    ) -> "DenseMatrix":
        """
        Creates a matrix with elements sampled from ``distribution``,
        one ``sample()`` call per element.
        Raises :py:class:`~fylki.errors.InvalidDimension` if ``rows`` or ``columns``
        is less than one (without sampling anything).
        """
        check_positive(rows, "rows")
        check_positive(columns, "columns")

        matrix = cls(rows, columns)
        data = matrix._data

        def fill_column(j: int) -> None:
            offset = j * rows
            for i in range(rows):
                data[offset + i] = distribution.sample()

        parallel_for(0, columns, fill_column)
        return matrix

    @property
    def buffer(self) -> NDArray[numpy.float64]:
        """The underlying column-major buffer (not a copy)."""
        return self._data

    def as_dense_buffer(self) -> NDArray[numpy.float64]:
        return self._data

    def create_matrix(self, rows: int, columns: int) -> "DenseMatrix":
        return DenseMatrix(rows, columns)

    def create_vector(self, count: int) -> DenseVector:
        return DenseVector(count)

    def at(self, row: int, column: int, value: float | None = None) -> float | None:
        if value is None:
            return float(self._data[column * self._rows + row])
        self._data[column * self._rows + row] = value
        return None

    def _row(self, data: NDArray[numpy.float64], row: int) -> NDArray[numpy.float64]:
        return data[row :: self._rows]

    def _column(self, data: NDArray[numpy.float64], column: int) -> NDArray[numpy.float64]:
        return data[column * self._rows : (column + 1) * self._rows]

    def clear(self) -> None:
        self._data.fill(0.0)

    def copy_to(self, target: Matrix) -> None:
        self._check_result_shape(target, self._rows, self._columns)
        target_data = target.as_dense_buffer()
        if target_data is None:
            super().copy_to(target)
        elif target_data is not self._data:
            numpy.copyto(target_data, self._data)

    def to_array(self) -> NDArray[numpy.float64]:
        return self._data.reshape((self._columns, self._rows)).T.copy()

    def transpose(self) -> "DenseMatrix":
        result = DenseMatrix(self._columns, self._rows)
        # The element (i, j) goes to (j, i), which is at the offset i * columns + j
        # in the result, so column j of the source becomes a strided row of the result.
        for j in range(self._columns):
            result._data[j :: self._columns] = self._column(self._data, j)
        return result

    def l1_norm(self) -> float:
        data = self._data
        return float(
            aggregate(
                0,
                self._columns,
                lambda j: float(numpy.abs(self._column(data, j)).sum()),
                predicate_max(),
            )
        )

    def infinity_norm(self) -> float:
        data = self._data
        return float(
            aggregate(
                0,
                self._rows,
                lambda i: float(numpy.abs(self._row(data, i)).sum()),
                predicate_max(),
            )
        )

    def frobenius_norm(self) -> float:
        data = self._data

        # The diagonal element i of A * A^T, the full product is never formed.
        def aat_diagonal(i: int) -> float:
            row = self._row(data, i)
            return abs(float(numpy.dot(row, row)))

        return math.sqrt(aggregate(0, self._rows, aat_diagonal))

    def trace(self) -> float:
        if not self.is_square:
            raise NotSquare(f"The trace requires a square matrix, got {self._rows}x{self._columns}")
        data = self._data
        order = self._rows
        return float(aggregate(0, order, lambda i: float(data[i * order + i])))

    # Fast paths

    def _fast_add(self, other: Matrix, result: Matrix) -> Any:
        buffers = _dense_buffers(other, result)
        if buffers is None:
            return NotImplemented
        other_data, result_data = buffers
        control.provider.add_arrays(self._data, other_data, result_data)
        return None

    def _fast_subtract(self, other: Matrix, result: Matrix) -> Any:
        buffers = _dense_buffers(other, result)
        if buffers is None:
            return NotImplemented
        other_data, result_data = buffers
        control.provider.subtract_arrays(self._data, other_data, result_data)
        return None

    def _fast_scale(self, scalar: float, result: Matrix) -> Any:
        result_data = result.as_dense_buffer()
        if result_data is None:
            return NotImplemented
        # The provider scales in place, so the source is copied into the result first.
        if result_data is not self._data:
            numpy.copyto(result_data, self._data)
        control.provider.scale_array(scalar, result_data)
        return None

    def _fast_negate(self, result: Matrix) -> Any:
        result_data = result.as_dense_buffer()
        if result_data is None:
            return NotImplemented
        data = self._data

        def negate_row(i: int) -> None:
            numpy.negative(self._row(data, i), out=self._row(result_data, i))

        parallel_for(0, self._rows, negate_row)
        return None

    def _fast_pointwise_multiply(self, other: Matrix, result: Matrix) -> Any:
        buffers = _dense_buffers(other, result)
        if buffers is None:
            return NotImplemented
        other_data, result_data = buffers
        data = self._data

        def multiply_column(j: int) -> None:
            with numpy.errstate(over="ignore", invalid="ignore"):
                numpy.multiply(
                    self._column(data, j),
                    self._column(other_data, j),
                    out=self._column(result_data, j),
                )

        parallel_for(0, self._columns, multiply_column)
        return None

    def _fast_pointwise_divide(self, other: Matrix, result: Matrix) -> Any:
        buffers = _dense_buffers(other, result)
        if buffers is None:
            return NotImplemented
        other_data, result_data = buffers
        data = self._data

        def divide_column(j: int) -> None:
            with numpy.errstate(divide="ignore", over="ignore", invalid="ignore"):
                numpy.divide(
                    self._column(data, j),
                    self._column(other_data, j),
                    out=self._column(result_data, j),
                )

        parallel_for(0, self._columns, divide_column)
        return None

    def _fast_multiply_vector(self, vector: Vector, result: Vector) -> Any:
        buffers = _dense_buffers(vector, result)
        if buffers is None:
            return NotImplemented
        vector_data, result_data = buffers
        data = self._data

        def multiply_row(i: int) -> None:
            result_data[i] = numpy.dot(self._row(data, i), vector_data)

        parallel_for(0, self._rows, multiply_row)
        return None

    def _fast_left_multiply(self, vector: Vector, result: Vector) -> Any:
        buffers = _dense_buffers(vector, result)
        if buffers is None:
            return NotImplemented
        vector_data, result_data = buffers
        data = self._data

        def multiply_column(j: int) -> None:
            result_data[j] = numpy.dot(vector_data, self._column(data, j))

        parallel_for(0, self._columns, multiply_column)
        return None

    def _fast_multiply_matrix(self, other: Matrix, result: Matrix) -> Any:
        buffers = _dense_buffers(other, result)
        if buffers is None:
            return NotImplemented
        other_data, result_data = buffers
        data = self._data

        # ``other`` is (columns x p), stored column by column.
        p = other.column_count
        other_view = other_data.reshape((p, self._columns)).T

        # Row j of the result is (row j of self) * other;
        # it is stored with the stride of the result's row count, which equals ours.
        def multiply_row(j: int) -> None:
            result_data[j :: self._rows] = numpy.dot(self._row(data, j), other_view)

        parallel_for(0, self._rows, multiply_row)
        return None

    def _fast_transpose_and_multiply(self, other: Matrix, result: Matrix) -> Any:
        buffers = _dense_buffers(other, result)
        if buffers is None:
            return NotImplemented
        other_data, result_data = buffers
        data = self._data

        # ``other`` is (p x columns); reading it as such avoids materializing the transpose.
        p = other.row_count
        other_view = other_data.reshape((self._columns, p)).T

        def multiply_row(j: int) -> None:
            result_data[j :: self._rows] = numpy.dot(other_view, self._row(data, j))

        parallel_for(0, self._rows, multiply_row)
        return None
