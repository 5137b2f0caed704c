"""
The interface every numeric backend implements.
Matrix kernels pass whole dense buffers (one-dimensional ``float64`` arrays of equal length)
to these functions and do not care how the arithmetic is carried out.
"""

import numpy
from numpy.typing import NDArray


class LinearAlgebraProvider:
    """
    The base class for numeric backends.

    All methods operate on flat buffers; the caller guarantees that
    the lengths of all the buffers passed to one call are equal.
    """

    def get_id(self) -> str:
        """Returns the identifier of the provider, as accepted by :py:func:`get_provider`."""
        raise NotImplementedError()

    def add_arrays(
        self, x: NDArray[numpy.float64], y: NDArray[numpy.float64], result: NDArray[numpy.float64]
    ) -> None:
        """Writes ``x + y`` to ``result``. ``result`` may be the same array as ``x`` or ``y``."""
        raise NotImplementedError()

    def subtract_arrays(
        self, x: NDArray[numpy.float64], y: NDArray[numpy.float64], result: NDArray[numpy.float64]
    ) -> None:
        """Writes ``x - y`` to ``result``. ``result`` may be the same array as ``x`` or ``y``."""
        raise NotImplementedError()

    def scale_array(self, alpha: float, x: NDArray[numpy.float64]) -> None:
        """Multiplies every element of ``x`` by ``alpha`` in place."""
        raise NotImplementedError()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.get_id()!r}>"
