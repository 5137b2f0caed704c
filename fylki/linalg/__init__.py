"""
Linear algebra.


Generic matrices and vectors
^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. autoclass:: Matrix
    :members:

.. autoclass:: Vector
    :members:


Dense storage
^^^^^^^^^^^^^

.. autoclass:: DenseMatrix
    :members:

.. autoclass:: DenseVector
    :members:
"""

from .dense import DenseMatrix
from .matrix import Matrix
from .vector import DenseVector, Vector
