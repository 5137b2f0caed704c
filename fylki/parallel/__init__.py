"""
Data-parallel primitives.

Every primitive distributes a range of indices over the worker threads
of the shared executor (see :py:mod:`fylki.control`) and blocks until all of them finish.
Tasks must not write to overlapping locations; no other synchronization is provided.


Pure parallel loops
^^^^^^^^^^^^^^^^^^^

.. autoclass:: PureParallel
    :members:

.. autofunction:: parallel_for


Reduction
^^^^^^^^^

.. autoclass:: Reduce
    :members:

.. autofunction:: aggregate


Predicates
^^^^^^^^^^

.. autoclass:: Predicate
    :members:

.. autofunction:: predicate_sum

.. autofunction:: predicate_max
"""

from .predicates import Predicate, predicate_max, predicate_sum
from .pureparallel import PureParallel, in_worker, parallel_for
from .reduce import Reduce, aggregate
