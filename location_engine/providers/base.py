"""
Base interface for place providers.

The engine talks to exactly one kind of third-party call, a "maps search".
Every provider implementation returns the provider's raw response so the
normalizer owns the translation into the internal model.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional


class ProviderType(Enum):
    """Supported place providers."""
    SERPAPI = "serpapi"


class PlaceProvider(ABC):
    """
    Abstract base class for place providers.

    Implementations must not raise on empty results (an empty response is a
    valid answer) and must raise ``ConfigurationError`` / ``ProviderError``
    for missing credentials and transport failures respectively. They never
    retry.
    """

    @abstractmethod
    async def maps_search(
        self,
        query: str,
        language: str,
        country: str,
        open_now: bool = False,
        viewport: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Run a maps search.

        Args:
            query: Resolved query text
            language: Result language (e.g. "vi")
            country: Country bias (e.g. "vn")
            open_now: Only return places that are currently open
            viewport: Optional "@lat,lng,zoomz" hint

        Returns:
            Raw provider payload; may hold ``local_results``,
            ``place_results`` and ``related_questions``
        """
        pass

    @property
    @abstractmethod
    def provider_type(self) -> ProviderType:
        """Return the provider type identifier."""
        pass

    async def close(self) -> None:
        """Release network resources held by the provider."""
        return None
