"""Numeric backend based on numpy ufuncs."""

import numpy
from numpy.typing import NDArray

from .api import LinearAlgebraProvider


class NumpyProvider(LinearAlgebraProvider):

    def get_id(self) -> str:
        return "numpy"

    def add_arrays(
        self, x: NDArray[numpy.float64], y: NDArray[numpy.float64], result: NDArray[numpy.float64]
    ) -> None:
        with numpy.errstate(all="ignore"):
            numpy.add(x, y, out=result)

    def subtract_arrays(
        self, x: NDArray[numpy.float64], y: NDArray[numpy.float64], result: NDArray[numpy.float64]
    ) -> None:
        with numpy.errstate(all="ignore"):
            numpy.subtract(x, y, out=result)

    def scale_array(self, alpha: float, x: NDArray[numpy.float64]) -> None:
        if alpha == 1.0:
            return
        with numpy.errstate(all="ignore"):
            numpy.multiply(x, alpha, out=x)
