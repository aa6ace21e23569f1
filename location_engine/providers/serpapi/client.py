"""
SerpAPI client for Google Maps search.

Issues the single outbound call the engine needs and returns the raw JSON
payload. It performs no retries and sets no timeout of its own beyond the
HTTP client's transport timeout.
https://serpapi.com/google-maps-api
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from ..base import PlaceProvider, ProviderType
from ..errors import ConfigurationError, ProviderError
from ..settings import EngineSettings, get_settings

logger = logging.getLogger(__name__)


class SerpApiPlaceProvider(PlaceProvider):
    """
    Place provider backed by SerpAPI's ``google_maps`` engine.

    The API key is checked on every call rather than at construction, so a
    process can start without credentials and fail only when a search is
    actually attempted.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the provider.

        Args:
            settings: Engine settings (falls back to the global settings)
            client: Optional pre-built HTTP client (created lazily otherwise)
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.serpapi_endpoint
        self.timeout = self.settings.http_timeout
        self._client = client
        self._stats = {"requests": 0, "failures": 0, "total_time_ms": 0.0}

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.SERPAPI

    @property
    def is_configured(self) -> bool:
        """Check if the provider has a valid API key."""
        return self.settings.is_configured

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    def build_params(
        self,
        query: str,
        language: str,
        country: str,
        open_now: bool = False,
        viewport: Optional[str] = None,
    ) -> Dict[str, str]:
        """Build the query string of a maps search request (without the key)."""
        params = {
            "engine": "google_maps",
            "type": "search",
            "q": query,
            "hl": language,
            "gl": country,
        }
        if open_now:
            params["open_now"] = "true"
        if viewport:
            params["ll"] = viewport
        return params

    async def maps_search(
        self,
        query: str,
        language: str,
        country: str,
        open_now: bool = False,
        viewport: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not self.is_configured:
            raise ConfigurationError(
                "SERPAPI_KEY is not configured. Set it in the environment or .env file"
            )

        params = self.build_params(query, language, country, open_now, viewport)
        params["api_key"] = self.settings.serpapi_key.strip()

        client = await self._get_client()
        started = time.perf_counter()
        self._stats["requests"] += 1

        try:
            response = await client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            self._stats["failures"] += 1
            logger.error(f"SerpAPI request failed for '{query}': {e}")
            raise ProviderError(
                f"SerpAPI request failed: {e}",
                provider=self.provider_type.value,
            ) from e
        finally:
            self._stats["total_time_ms"] += (time.perf_counter() - started) * 1000

        if response.status_code < 200 or response.status_code >= 300:
            self._stats["failures"] += 1
            logger.error(f"SerpAPI error {response.status_code} for '{query}'")
            raise ProviderError(
                f"SerpAPI error {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
                provider=self.provider_type.value,
            )

        try:
            data = response.json()
        except ValueError as e:
            self._stats["failures"] += 1
            raise ProviderError(
                f"SerpAPI returned a non-JSON body: {e}",
                status_code=response.status_code,
                provider=self.provider_type.value,
            ) from e

        if not isinstance(data, dict):
            return {}

        logger.debug(
            f"SerpAPI search '{query}' ({params.get('ll', 'no viewport')}) returned "
            f"{len(data.get('local_results') or [])} local results"
        )
        return data

    def get_stats(self) -> Dict[str, Any]:
        """Request counters for monitoring."""
        requests = self._stats["requests"]
        avg = self._stats["total_time_ms"] / requests if requests else 0.0
        return {
            "provider": self.provider_type.value,
            "requests": requests,
            "failures": self._stats["failures"],
            "avg_response_time_ms": round(avg, 2),
        }

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
