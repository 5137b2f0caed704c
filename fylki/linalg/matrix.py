"""
The generic matrix contract.

:py:class:`Matrix` defines the public interface of every matrix representation,
checks the preconditions of all the operations, and provides
representation-agnostic implementations of them that only use
:py:meth:`Matrix.at` and :py:meth:`Matrix.create_matrix`.

Each operation ``op`` is carried out in two tiers:
first ``_fast_op()`` is tried, which a representation overrides to operate
on its own storage directly; if it returns ``NotImplemented``
(which is what the methods of this class do), ``_generic_op()`` is called.
Preconditions are checked before either of them, so neither has to validate anything.
"""

import logging
import math
import numbers
from typing import Any

import numpy
from numpy.typing import NDArray

from .. import helpers
from ..errors import DimensionMismatch, NotSquare, check_non_negative
from .vector import DenseVector, Vector

logger = logging.getLogger(__name__)

TEMPLATE = helpers.template_for(__file__)


def _aliases(result: Any, *operands: Any) -> bool:
    """
    Returns ``True`` if ``result`` is one of ``operands``
    or shares its dense buffer with one of them.
    """
    result_buffer = result.as_dense_buffer()
    for operand in operands:
        if operand is result:
            return True
        if result_buffer is not None:
            operand_buffer = operand.as_dense_buffer()
            if operand_buffer is not None and numpy.may_share_memory(
                result_buffer, operand_buffer
            ):
                return True
    return False


class Matrix:
    """
    The base class for matrices of real numbers.

    Subclasses must implement :py:meth:`at` and :py:meth:`create_matrix`;
    other methods may be overridden to provide faster implementations.

    :param rows: the number of rows.
    :param columns: the number of columns.
    """

    def __init__(self, rows: int, columns: int):
        check_non_negative(rows, "rows")
        check_non_negative(columns, "columns")
        self._rows = rows
        self._columns = columns

    @property
    def row_count(self) -> int:
        return self._rows

    @property
    def column_count(self) -> int:
        return self._columns

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._columns)

    @property
    def is_square(self) -> bool:
        return self._rows == self._columns

    # Representation-specific part

    def at(self, row: int, column: int, value: float | None = None) -> float | None:
        """
        If ``value`` is ``None``, returns the element at ``(row, column)``,
        otherwise sets it to ``value``.
        The indices are not checked; use the indexer (``m[row, column]``) for that.
        """
        raise NotImplementedError()

    def create_matrix(self, rows: int, columns: int) -> "Matrix":
        """Creates a zero matrix of the same representation with the given shape."""
        raise NotImplementedError()

    def create_vector(self, count: int) -> Vector:
        """Creates a zero vector of the representation matching this matrix."""
        return DenseVector(count)

    def as_dense_buffer(self) -> NDArray[numpy.float64] | None:
        """
        Returns the column-major buffer if the matrix has the dense representation,
        otherwise ``None``.
        """
        return None

    # Element access

    def _check_indices(self, row: int, column: int) -> None:
        if not 0 <= row < self._rows:
            raise IndexError(f"Row {row} is out of range for a matrix with {self._rows} rows")
        if not 0 <= column < self._columns:
            raise IndexError(
                f"Column {column} is out of range for a matrix with {self._columns} columns"
            )

    def __getitem__(self, indices: tuple[int, int]) -> float:
        row, column = indices
        self._check_indices(row, column)
        return self.at(row, column)  # type: ignore[return-value]

    def __setitem__(self, indices: tuple[int, int], value: float) -> None:
        row, column = indices
        self._check_indices(row, column)
        self.at(row, column, float(value))

    def clear(self) -> None:
        """Sets all elements to zero."""
        for j in range(self._columns):
            for i in range(self._rows):
                self.at(i, j, 0.0)

    def copy_to(self, target: "Matrix") -> None:
        """Copies the elements of this matrix into ``target`` of the same shape."""
        self._check_result_shape(target, self._rows, self._columns)
        if target is self:
            return
        for j in range(self._columns):
            for i in range(self._rows):
                target.at(i, j, self.at(i, j))

    def copy(self) -> "Matrix":
        """Returns a copy of this matrix in the same representation."""
        result = self.create_matrix(self._rows, self._columns)
        self.copy_to(result)
        return result

    def to_array(self) -> NDArray[numpy.float64]:
        """Returns a copy of the contents as a two-dimensional (row-major) numpy array."""
        result = numpy.empty((self._rows, self._columns), numpy.float64)
        for j in range(self._columns):
            for i in range(self._rows):
                result[i, j] = self.at(i, j)
        return result

    # Precondition checks

    def _check_same_shape(self, other: "Matrix") -> None:
        if other.shape != self.shape:
            raise DimensionMismatch(
                f"Matrix shapes differ: {self._rows}x{self._columns} "
                f"and {other.row_count}x{other.column_count}"
            )

    @staticmethod
    def _check_result_shape(result: "Matrix", rows: int, columns: int) -> None:
        if result.shape != (rows, columns):
            raise DimensionMismatch(
                f"Expected a {rows}x{columns} result matrix, "
                f"got {result.row_count}x{result.column_count}"
            )

    def _prepare_result(self, result: "Matrix | None", rows: int, columns: int) -> "Matrix":
        if result is None:
            return self.create_matrix(rows, columns)
        self._check_result_shape(result, rows, columns)
        return result

    def _prepare_vector_result(self, result: Vector | None, count: int) -> Vector:
        if result is None:
            return self.create_vector(count)
        result.check_count(count)
        return result

    # Queries

    def l1_norm(self) -> float:
        """The maximum absolute column sum."""
        norm = 0.0
        for j in range(self._columns):
            s = 0.0
            for i in range(self._rows):
                s += abs(self.at(i, j))  # type: ignore[arg-type]
            norm = max(norm, s)
        return norm

    def infinity_norm(self) -> float:
        """The maximum absolute row sum."""
        norm = 0.0
        for i in range(self._rows):
            s = 0.0
            for j in range(self._columns):
                s += abs(self.at(i, j))  # type: ignore[arg-type]
            norm = max(norm, s)
        return norm

    def frobenius_norm(self) -> float:
        r"""
        The Frobenius norm, calculated as :math:`\sqrt{\sum_i |(A A^T)_{ii}|}`.
        Only the diagonal of :math:`A A^T` is computed.
        """
        norm = 0.0
        for i in range(self._rows):
            s = 0.0
            for j in range(self._columns):
                s += self.at(i, j) * self.at(i, j)  # type: ignore[operator]
            norm += abs(s)
        return math.sqrt(norm)

    def trace(self) -> float:
        """
        The sum of the diagonal elements.
        Raises :py:class:`~fylki.errors.NotSquare` if the matrix is not square.
        """
        if not self.is_square:
            raise NotSquare(f"The trace requires a square matrix, got {self._rows}x{self._columns}")
        return math.fsum(self.at(i, i) for i in range(self._rows))  # type: ignore[misc]

    # Transformations

    def transpose(self) -> "Matrix":
        """Returns a new matrix with rows and columns swapped."""
        result = self.create_matrix(self._columns, self._rows)
        for j in range(self._columns):
            for i in range(self._rows):
                result.at(j, i, self.at(i, j))
        return result

    def conjugate_transpose(self) -> "Matrix":
        """Same as :py:meth:`transpose`, since the elements are real."""
        return self.transpose()

    # Elementwise arithmetic

    def add(self, other: "Matrix", result: "Matrix | None" = None) -> "Matrix":
        """Writes ``self + other`` into ``result`` (allocated if not given) and returns it."""
        self._check_same_shape(other)
        result = self._prepare_result(result, self._rows, self._columns)
        if self._fast_add(other, result) is NotImplemented:
            logger.debug("add: using the generic implementation")
            self._generic_add(other, result)
        return result

    def subtract(self, other: "Matrix", result: "Matrix | None" = None) -> "Matrix":
        """Writes ``self - other`` into ``result`` (allocated if not given) and returns it."""
        self._check_same_shape(other)
        result = self._prepare_result(result, self._rows, self._columns)
        if self._fast_subtract(other, result) is NotImplemented:
            logger.debug("subtract: using the generic implementation")
            self._generic_subtract(other, result)
        return result

    def scale(self, scalar: float, result: "Matrix | None" = None) -> "Matrix":
        """
        Writes ``scalar * self`` into ``result`` (allocated if not given) and returns it.
        The matrix itself is only modified if it is passed as ``result``.
        """
        result = self._prepare_result(result, self._rows, self._columns)
        if self._fast_scale(float(scalar), result) is NotImplemented:
            logger.debug("scale: using the generic implementation")
            self._generic_scale(float(scalar), result)
        return result

    def negate(self, result: "Matrix | None" = None) -> "Matrix":
        """Writes ``-self`` into ``result`` (allocated if not given) and returns it."""
        result = self._prepare_result(result, self._rows, self._columns)
        if self._fast_negate(result) is NotImplemented:
            logger.debug("negate: using the generic implementation")
            self._generic_negate(result)
        return result

    def pointwise_multiply(self, other: "Matrix", result: "Matrix | None" = None) -> "Matrix":
        """Writes the elementwise product of ``self`` and ``other`` into ``result``."""
        self._check_same_shape(other)
        result = self._prepare_result(result, self._rows, self._columns)
        if self._fast_pointwise_multiply(other, result) is NotImplemented:
            logger.debug("pointwise_multiply: using the generic implementation")
            self._generic_pointwise_multiply(other, result)
        return result

    def pointwise_divide(self, other: "Matrix", result: "Matrix | None" = None) -> "Matrix":
        """
        Writes the elementwise quotient of ``self`` and ``other`` into ``result``.
        Division by zero produces infinities or NaNs, not an error.
        """
        self._check_same_shape(other)
        result = self._prepare_result(result, self._rows, self._columns)
        if self._fast_pointwise_divide(other, result) is NotImplemented:
            logger.debug("pointwise_divide: using the generic implementation")
            self._generic_pointwise_divide(other, result)
        return result

    # Products

    def multiply(self, other: Any, result: Any = None) -> Any:
        """
        Depending on the type of ``other``, multiplies this matrix by a scalar
        (same as :py:meth:`scale`), by a :py:class:`~fylki.linalg.Vector`
        (the result is a vector of size ``row_count``),
        or by another :py:class:`Matrix`.
        The result is written into ``result`` (allocated if not given) and returned.
        """
        if isinstance(other, numbers.Real):
            return self.scale(float(other), result)
        if isinstance(other, Vector):
            return self._multiply_vector(other, result)
        if isinstance(other, Matrix):
            return self._multiply_matrix(other, result)
        raise TypeError(f"Cannot multiply a matrix by {type(other).__name__}")

    def _multiply_vector(self, vector: Vector, result: Vector | None) -> Vector:
        vector.check_count(self._columns)
        result = self._prepare_vector_result(result, self._rows)
        if _aliases(result, vector):
            temp = result.create_vector(self._rows)
            self._multiply_vector(vector, temp)
            for i in range(self._rows):
                result.at(i, temp.at(i))
            return result
        if self._fast_multiply_vector(vector, result) is NotImplemented:
            logger.debug("multiply (vector): using the generic implementation")
            self._generic_multiply_vector(vector, result)
        return result

    def left_multiply(self, vector: Vector, result: Vector | None = None) -> Vector:
        """
        Writes ``vector * self`` (a vector of size ``column_count``) into ``result``
        (allocated if not given) and returns it.
        """
        vector.check_count(self._rows)
        result = self._prepare_vector_result(result, self._columns)
        if _aliases(result, vector):
            temp = result.create_vector(self._columns)
            self.left_multiply(vector, temp)
            for j in range(self._columns):
                result.at(j, temp.at(j))
            return result
        if self._fast_left_multiply(vector, result) is NotImplemented:
            logger.debug("left_multiply: using the generic implementation")
            self._generic_left_multiply(vector, result)
        return result

    def _multiply_matrix(self, other: "Matrix", result: "Matrix | None") -> "Matrix":
        if self._columns != other.row_count:
            raise DimensionMismatch(
                f"Cannot multiply a {self._rows}x{self._columns} matrix "
                f"by a {other.row_count}x{other.column_count} one"
            )
        result = self._prepare_result(result, self._rows, other.column_count)
        if _aliases(result, self, other):
            temp = result.create_matrix(self._rows, other.column_count)
            self._multiply_matrix(other, temp)
            temp.copy_to(result)
            return result
        if self._fast_multiply_matrix(other, result) is NotImplemented:
            logger.debug("multiply (matrix): using the generic implementation")
            self._generic_multiply_matrix(other, result)
        return result

    def transpose_and_multiply(self, other: "Matrix", result: "Matrix | None" = None) -> "Matrix":
        """
        Writes ``self * other^T`` into ``result`` (allocated if not given) and returns it,
        without creating the transposed matrix.
        """
        if self._columns != other.column_count:
            raise DimensionMismatch(
                f"Cannot multiply a {self._rows}x{self._columns} matrix "
                f"by the transpose of a {other.row_count}x{other.column_count} one"
            )
        result = self._prepare_result(result, self._rows, other.row_count)
        if _aliases(result, self, other):
            temp = result.create_matrix(self._rows, other.row_count)
            self.transpose_and_multiply(other, temp)
            temp.copy_to(result)
            return result
        if self._fast_transpose_and_multiply(other, result) is NotImplemented:
            logger.debug("transpose_and_multiply: using the generic implementation")
            self._generic_transpose_and_multiply(other, result)
        return result

    # Fast paths. Representations override these and return ``NotImplemented``
    # when they cannot handle the given operands.

    def _fast_add(self, other: "Matrix", result: "Matrix") -> Any:
        return NotImplemented

    def _fast_subtract(self, other: "Matrix", result: "Matrix") -> Any:
        return NotImplemented

    def _fast_scale(self, scalar: float, result: "Matrix") -> Any:
        return NotImplemented

    def _fast_negate(self, result: "Matrix") -> Any:
        return NotImplemented

    def _fast_pointwise_multiply(self, other: "Matrix", result: "Matrix") -> Any:
        return NotImplemented

    def _fast_pointwise_divide(self, other: "Matrix", result: "Matrix") -> Any:
        return NotImplemented

    def _fast_multiply_vector(self, vector: Vector, result: Vector) -> Any:
        return NotImplemented

    def _fast_left_multiply(self, vector: Vector, result: Vector) -> Any:
        return NotImplemented

    def _fast_multiply_matrix(self, other: "Matrix", result: "Matrix") -> Any:
        return NotImplemented

    def _fast_transpose_and_multiply(self, other: "Matrix", result: "Matrix") -> Any:
        return NotImplemented

    # Generic implementations

    def _generic_add(self, other: "Matrix", result: "Matrix") -> None:
        for j in range(self._columns):
            for i in range(self._rows):
                result.at(i, j, self.at(i, j) + other.at(i, j))  # type: ignore[operator]

    def _generic_subtract(self, other: "Matrix", result: "Matrix") -> None:
        for j in range(self._columns):
            for i in range(self._rows):
                result.at(i, j, self.at(i, j) - other.at(i, j))  # type: ignore[operator]

    def _generic_scale(self, scalar: float, result: "Matrix") -> None:
        for j in range(self._columns):
            for i in range(self._rows):
                result.at(i, j, scalar * self.at(i, j))  # type: ignore[operator]

    def _generic_negate(self, result: "Matrix") -> None:
        for j in range(self._columns):
            for i in range(self._rows):
                result.at(i, j, -self.at(i, j))  # type: ignore[operator]

    def _generic_pointwise_multiply(self, other: "Matrix", result: "Matrix") -> None:
        for j in range(self._columns):
            for i in range(self._rows):
                result.at(i, j, self.at(i, j) * other.at(i, j))  # type: ignore[operator]

    def _generic_pointwise_divide(self, other: "Matrix", result: "Matrix") -> None:
        with numpy.errstate(divide="ignore", invalid="ignore"):
            for j in range(self._columns):
                for i in range(self._rows):
                    # numpy scalars follow IEEE-754 where Python floats would raise
                    value = numpy.float64(self.at(i, j)) / numpy.float64(other.at(i, j))
                    result.at(i, j, float(value))

    def _generic_multiply_vector(self, vector: Vector, result: Vector) -> None:
        for i in range(self._rows):
            s = 0.0
            for j in range(self._columns):
                s += self.at(i, j) * vector.at(j)  # type: ignore[operator]
            result.at(i, s)

    def _generic_left_multiply(self, vector: Vector, result: Vector) -> None:
        for j in range(self._columns):
            s = 0.0
            for i in range(self._rows):
                s += vector.at(i) * self.at(i, j)  # type: ignore[operator]
            result.at(j, s)

    def _generic_multiply_matrix(self, other: "Matrix", result: "Matrix") -> None:
        for k in range(other.column_count):
            for i in range(self._rows):
                s = 0.0
                for j in range(self._columns):
                    s += self.at(i, j) * other.at(j, k)  # type: ignore[operator]
                result.at(i, k, s)

    def _generic_transpose_and_multiply(self, other: "Matrix", result: "Matrix") -> None:
        for k in range(other.row_count):
            for i in range(self._rows):
                s = 0.0
                for j in range(self._columns):
                    s += self.at(i, j) * other.at(k, j)  # type: ignore[operator]
                result.at(i, k, s)

    # Operators

    def __add__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> "Matrix":
        return self.negate()

    def __mul__(self, other: Any) -> Any:
        if not isinstance(other, (numbers.Real, Vector, Matrix)):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other: Any) -> Any:
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return self.scale(float(other))

    def __matmul__(self, other: Any) -> Any:
        if not isinstance(other, (Vector, Matrix)):
            return NotImplemented
        return self.multiply(other)

    # Text representation

    def to_string(self, max_rows: int = 8, max_columns: int = 6, fmt: str = ".6g") -> str:
        """
        Renders the matrix as text, one row per line.
        If there are more than ``max_rows`` rows or ``max_columns`` columns,
        the middle ones are replaced by ellipses.
        """
        rows = _elided_indices(self._rows, max_rows)
        columns = _elided_indices(self._columns, max_columns)

        cells = [
            [
                "..." if i is None or j is None else format(self.at(i, j), fmt)
                for j in columns
            ]
            for i in rows
        ]
        width = max((len(cell) for row in cells for cell in row), default=0)
        lines = [[cell.rjust(width) for cell in row] for row in cells]

        return TEMPLATE.render(
            name=type(self).__name__, rows=self._rows, columns=self._columns, lines=lines
        ).rstrip("\n")

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._rows}x{self._columns}>"


def _elided_indices(length: int, limit: int) -> list[int | None]:
    if length <= limit:
        return list(range(length))
    head = (limit + 1) // 2
    tail = limit - head
    return [*range(head), None, *range(length - tail, length)]
