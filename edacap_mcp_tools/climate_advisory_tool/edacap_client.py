"""
EDACaP (Aclimate) API Client

Async HTTP client for the Aclimate Web API, which publishes weather stations,
seasonal climate forecasts, historical climatology and agronomic (yield)
forecasts for Ethiopia.

API documentation: https://docs.aclimate.org/en/latest/
Swagger: https://webapi.aclimate.org/swagger/index.html
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://webapi.aclimate.org"
DEFAULT_TIMEOUT_SECONDS = 10.0
USER_AGENT = "EDACaP-MCP-Server/1.0.0"


class EDACaPError(Exception):
    """Base class for errors raised while talking to the EDACaP service."""


class UpstreamError(EDACaPError):
    """The EDACaP service answered with a non-2xx status."""

    def __init__(
        self,
        status_code: Optional[int],
        body: str = "",
        url: str = "",
        message: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(message or f"EDACaP API error ({status_code}): {body or 'no response body'}")


class UpstreamConnectionError(UpstreamError):
    """The EDACaP service could not be reached at all."""

    def __init__(self, reason: str, url: str = ""):
        super().__init__(None, reason, url, message=f"EDACaP API unreachable: {reason}")


class UpstreamTimeoutError(EDACaPError, asyncio.TimeoutError):
    """No response arrived inside the configured timeout."""

    def __init__(self, timeout_seconds: float, url: str = ""):
        self.timeout_seconds = timeout_seconds
        self.url = url
        super().__init__(
            f"Request timeout: API took too long to respond ({timeout_seconds:g}s limit)"
        )


class RegionUnavailableError(EDACaPError):
    """The configured region is not offered by the EDACaP service."""


class EDACaPClient:
    """
    Thin JSON client for the Aclimate Web API.

    Every request opens its own aiohttp session and is bounded by a total
    timeout measured from the moment the request is issued.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize the EDACaP client.

        Args:
            base_url: Base URL of the Aclimate Web API (no trailing slash needed)
            timeout_seconds: Total time allowed for one request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        logger.info(f"Initialized EDACaP client for {self.base_url} (timeout {timeout_seconds:g}s)")

    async def fetch(self, path: str) -> Any:
        """
        GET a path relative to the base URL and return the decoded JSON body.

        Raises:
            UpstreamError: non-2xx response
            UpstreamConnectionError: the service could not be reached
            UpstreamTimeoutError: no response inside the timeout
        """
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        logger.info(f"[EDACaP API] Fetching: {url}")

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, headers=headers) as response:
                    body = await response.text()
                    status = response.status
                    reason = response.reason or ""
        except asyncio.TimeoutError as e:
            raise UpstreamTimeoutError(self.timeout_seconds, url) from e
        except aiohttp.ClientResponseError as e:
            raise UpstreamError(e.status, e.message, url) from e
        except aiohttp.ClientError as e:
            raise UpstreamConnectionError(str(e) or type(e).__name__, url) from e

        if not 200 <= status < 300:
            raise UpstreamError(status, body or reason, url)
        if not body.strip():
            return None

        try:
            return json.loads(body)
        except ValueError as e:
            raise UpstreamError(status, f"invalid JSON body: {body[:200]}", url) from e

    async def get_countries(self) -> List[Dict[str, Any]]:
        """Countries available in the Aclimate system."""
        return await self.fetch("/api/Geographic/Country/json")

    async def get_weather_stations(self, country_id: str) -> List[Dict[str, Any]]:
        """Weather stations registered for a country."""
        return await self.fetch(f"/api/Geographic/{country_id}/WeatherStations/json")

    async def get_climate_forecast(self, weather_station_ids: str) -> Dict[str, Any]:
        """
        Seasonal climate forecast (with performance metrics) for one or more
        comma-separated station IDs.
        """
        return await self.fetch(f"/api/Forecast/Climate/{weather_station_ids}/true/json")

    async def get_agronomic_forecast(self, weather_station_ids: str) -> Any:
        """Yield forecasts per cultivar and soil for comma-separated station IDs."""
        return await self.fetch(f"/api/Forecast/Yield/{weather_station_ids}/json")

    async def get_historical_climate(self, weather_station_ids: str) -> Any:
        """Historical monthly climatology for comma-separated station IDs."""
        return await self.fetch(f"/api/Historical/Climatology/{weather_station_ids}/json")
