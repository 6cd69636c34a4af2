"""
Forecast probing over nearby stations.

EDACaP forecast coverage is sparse: the closest station often has no active
forecast. The probe walks the stations nearest first, one at a time, and
stops at the first one whose forecast is usable. The number of stations
tried per query is capped by the probe budget.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Set

from .edacap_client import UpstreamError, UpstreamTimeoutError
from .forecast_normalizer import has_climate_data
from .models import Accepted, Exhausted, ForecastQueryResult, RankedCandidate, Station
from .station_directory import StationDirectory
from .station_ranking import rank_stations

logger = logging.getLogger(__name__)

DEFAULT_PROBE_BUDGET = 3

ForecastFetcher = Callable[[str], Awaitable[Any]]


class ForecastProbe:
    """
    Finds the nearest station with usable forecast data.

    Args:
        directory: Source of the region's station list
        fetch_forecast: Coroutine function taking a station id, returning the payload
        is_usable: Acceptance test for a fetched payload
        probe_budget: Default maximum number of stations tried per query
    """

    def __init__(
        self,
        directory: StationDirectory,
        fetch_forecast: ForecastFetcher,
        is_usable: Callable[[Any], bool] = has_climate_data,
        probe_budget: int = DEFAULT_PROBE_BUDGET,
    ):
        self.directory = directory
        self.fetch_forecast = fetch_forecast
        self.is_usable = is_usable
        self.probe_budget = probe_budget

    async def find_forecast(
        self,
        latitude: float,
        longitude: float,
        region_id: str,
        probe_budget: Optional[int] = None,
    ) -> ForecastQueryResult:
        """
        Rank the region's stations around a point and probe them.

        Errors loading the station list propagate to the caller.
        """
        stations = await self.directory.get_stations(region_id)
        candidates = rank_stations(latitude, longitude, stations)
        logger.info(
            f"Probing forecasts near ({latitude}, {longitude}): "
            f"{len(candidates)} ranked stations in region {region_id}"
        )
        return await self.probe(candidates, probe_budget)

    async def probe(
        self,
        candidates: Sequence[RankedCandidate],
        probe_budget: Optional[int] = None,
    ) -> ForecastQueryResult:
        """
        Try ranked candidates in order until one is accepted or the budget runs out.

        A candidate whose fetch raises UpstreamError or UpstreamTimeoutError
        counts as an attempt without data. Cancellation is not caught.
        """
        budget = self.probe_budget if probe_budget is None else probe_budget
        if budget < 1:
            raise ValueError(f"probe_budget must be at least 1, got {budget}")

        attempted: List[Station] = []
        seen: Set[str] = set()
        failures: Dict[str, str] = {}

        for candidate in candidates:
            if len(attempted) >= budget:
                break
            station = candidate.station
            if station.id in seen:
                continue
            seen.add(station.id)
            attempted.append(station)

            logger.info(
                f"Probe attempt {len(attempted)}/{budget}: station {station.name} "
                f"({station.id}) at {candidate.distance_km:.1f} km"
            )
            try:
                payload = await self.fetch_forecast(station.id)
            except (UpstreamError, UpstreamTimeoutError) as e:
                logger.warning(f"Forecast fetch failed for station {station.id}: {e}")
                failures[station.id] = str(e)
                continue

            if self.is_usable(payload):
                logger.info(f"Accepted station {station.name} ({station.id})")
                return Accepted(
                    station=station,
                    payload=payload,
                    distance_km=candidate.distance_km,
                    attempts=len(attempted),
                )
            logger.info(f"No forecast data at station {station.id}")

        logger.info(f"Probe exhausted after {len(attempted)} station(s)")
        return Exhausted(attempted=tuple(attempted), failures=tuple(failures.items()))
