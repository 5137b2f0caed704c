"""
Reference numeric backend with plain Python loops.
Slow, but does not depend on anything beyond indexing of the buffers,
which makes it a useful baseline when checking other providers.
"""

import numpy
from numpy.typing import NDArray

from .api import LinearAlgebraProvider


class ManagedProvider(LinearAlgebraProvider):

    def get_id(self) -> str:
        return "managed"

    def add_arrays(
        self, x: NDArray[numpy.float64], y: NDArray[numpy.float64], result: NDArray[numpy.float64]
    ) -> None:
        with numpy.errstate(all="ignore"):
            for i in range(len(result)):
                result[i] = x[i] + y[i]

    def subtract_arrays(
        self, x: NDArray[numpy.float64], y: NDArray[numpy.float64], result: NDArray[numpy.float64]
    ) -> None:
        with numpy.errstate(all="ignore"):
            for i in range(len(result)):
                result[i] = x[i] - y[i]

    def scale_array(self, alpha: float, x: NDArray[numpy.float64]) -> None:
        if alpha == 1.0:
            return
        with numpy.errstate(all="ignore"):
            for i in range(len(x)):
                x[i] = alpha * x[i]
