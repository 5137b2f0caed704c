"""
Exceptions raised when a matrix operation is called with arguments
that violate its preconditions.
All of them are subclasses of ``ValueError``, so code that does not care
about the exact kind of violation can catch that instead.
"""


class ArgumentError(ValueError):
    """The base class for precondition violations."""


class InvalidDimension(ArgumentError):
    """
    Thrown by constructors and factories if a requested number of rows or columns
    is negative, or non-positive where a positive one is required
    (:py:meth:`~fylki.linalg.DenseMatrix.identity`, :py:meth:`~fylki.linalg.DenseMatrix.random`).
    """


class DimensionMismatch(ArgumentError):
    """
    Thrown if shapes of operands (or of the result target) are incompatible
    with the requested operation.
    """


class NotSquare(ArgumentError):
    """Thrown by operations defined only for square matrices (e.g. the trace)."""


def check_positive(value: int, name: str) -> None:
    if value < 1:
        raise InvalidDimension(f"{name} must be positive, got {value}")


def check_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise InvalidDimension(f"{name} must be non-negative, got {value}")
