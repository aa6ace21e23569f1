"""
Error taxonomy for the location engine.

Provider failures, configuration problems and "not found" outcomes are
kept as distinct exception types so callers can tell a missing API key
from a provider outage from an address that simply does not resolve.
"""

from typing import Optional


class LocationEngineError(Exception):
    """Base class for every error raised by the engine."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(LocationEngineError):
    """Required configuration (e.g. the provider API key) is missing."""


class ProviderError(LocationEngineError):
    """
    Transport or HTTP failure while talking to the place provider.

    ``status_code`` is ``None`` when the request never produced a response
    (connection refused, timeout, DNS failure...).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        provider: Optional[str] = None,
    ):
        self.status_code = status_code
        self.provider = provider
        super().__init__(message)


class LocationNotFoundError(LocationEngineError):
    """Geocoding produced no candidate with coordinates."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Location not found for query: {query}")
