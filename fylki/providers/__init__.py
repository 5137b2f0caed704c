"""
Numeric backends.

Dense matrix kernels forward plain elementwise arithmetic on whole buffers
(addition, subtraction, scaling) to the currently active provider
(see :py:attr:`fylki.control.Control.provider`).


.. autoclass:: LinearAlgebraProvider
    :members:

.. autofunction:: get_provider

.. autofunction:: provider_ids
"""

from .api import LinearAlgebraProvider
from .api_discovery import get_provider, managed_id, numpy_id, provider_ids
