"""
Column-major dense matrices with parallel kernels and pluggable numeric backends.
"""

import logging

from .control import Control, control
from .errors import ArgumentError, DimensionMismatch, InvalidDimension, NotSquare
from .linalg import DenseMatrix, DenseVector, Matrix, Vector
from .version import VERSION

__version__ = ".".join(str(x) for x in VERSION)

logging.getLogger(__name__).addHandler(logging.NullHandler())
