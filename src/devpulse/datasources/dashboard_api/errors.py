"""Failures raised by the dashboard API client.

The fetch layer catches ``DataLayerError`` and either substitutes synthetic
data or surfaces ``str(exc)`` as ``FetchState.error``.
"""

from __future__ import annotations


class DataLayerError(Exception):
    """Base class for recoverable data acquisition failures."""


class NetworkError(DataLayerError):
    """Connection failure or timeout."""


class UpstreamError(DataLayerError):
    """The API answered, but reported failure or sent a malformed payload."""


class EmptyDataset(DataLayerError):
    """The API answered successfully with zero usable points."""
