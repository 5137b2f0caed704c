"""
This module contains functions for provider discovery.
"""

from .api import LinearAlgebraProvider


def numpy_id() -> str:
    """Returns the identifier of the numpy-based provider."""
    return "numpy"


def managed_id() -> str:
    """Returns the identifier of the pure Python provider."""
    return "managed"


def provider_ids() -> list[str]:
    """Returns a list of identifiers for all known providers."""
    return [numpy_id(), managed_id()]


def get_provider(provider_id: str) -> LinearAlgebraProvider:
    """
    Returns a new provider object with the interface
    :py:class:`~fylki.providers.LinearAlgebraProvider` for the given identifier.
    """
    if provider_id == numpy_id():
        from .numpy_provider import NumpyProvider

        return NumpyProvider()
    if provider_id == managed_id():
        from .managed import ManagedProvider

        return ManagedProvider()
    raise ValueError("Unrecognized provider: " + str(provider_id))
