"""
Time-bounded cache of the station list for a region.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from .models import Station, record_id

logger = logging.getLogger(__name__)

DEFAULT_STATION_TTL_SECONDS = 3600.0


class StationDirectory:
    """
    Owns the station list for each region id.

    A cached list younger than the TTL is always served without a network
    call. Expiry is purely time based. Fetch errors propagate unchanged;
    there is no stale fallback.
    """

    def __init__(
        self,
        client: Any,
        ttl_seconds: float = DEFAULT_STATION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            client: Object exposing `async get_weather_stations(region_id)`
            ttl_seconds: How long a fetched list stays fresh
            clock: Monotonic time source, injectable for tests
        """
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._cache: Dict[str, Tuple[float, Tuple[Station, ...]]] = {}

    async def get_stations(self, region_id: str) -> Tuple[Station, ...]:
        """Stations for a region, in upstream order."""
        entry = self._cache.get(region_id)
        if entry is not None:
            fetched_at, stations = entry
            if self.clock() - fetched_at < self.ttl_seconds:
                logger.info(f"Station cache hit for region {region_id} ({len(stations)} stations)")
                return stations

        logger.info(f"Station cache miss for region {region_id}, fetching from EDACaP")
        payload = await self.client.get_weather_stations(region_id)
        stations = tuple(
            Station.from_payload(record) for record in (payload or []) if record_id(record) is not None
        )
        # TTL counts from fetch completion.
        self._cache[region_id] = (self.clock(), stations)
        logger.info(f"Cached {len(stations)} stations for region {region_id}")
        return stations

    def invalidate(self, region_id: Optional[str] = None) -> None:
        """Forget the cached list for one region, or for all regions."""
        if region_id is None:
            self._cache.clear()
        else:
            self._cache.pop(region_id, None)
