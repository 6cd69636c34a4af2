"""
Climate Advisory Tool Implementation

Implements the location-based query tools over the Aclimate/EDACaP Web API
for Ethiopian farmers. Callers usually pass farm coordinates; the tools
resolve them to nearby weather stations, fetch forecasts keyed by station ID
and return normalized results.

Functions:
    - get_weather_stations: List the stations registered for Ethiopia
    - find_nearest_station: Closest station to a location
    - get_climate_forecast: Seasonal forecast, probing nearby stations for data
    - get_crop_forecast: Crop yield forecast for the nearest station
    - get_historical_climate: Monthly climatology for the nearest station
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from .config import Settings, load_settings
from .edacap_client import EDACaPClient, RegionUnavailableError
from .forecast_normalizer import (
    has_agronomic_data,
    has_climate_data,
    has_historical_data,
    normalize_agronomic,
    normalize_climate,
    normalize_historical,
)
from .forecast_probe import ForecastProbe
from .models import Exhausted, RankedCandidate, Region
from .region_resolver import RegionResolver, match_region
from .station_directory import StationDirectory
from .station_ranking import nearest_station
from .tool_schema import MESSAGES

logger = logging.getLogger(__name__)


class ClimateAdvisoryService:
    """
    Process-wide state behind the tools: the EDACaP client, the resolved
    region and the station cache.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[Any] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the service.

        Args:
            settings: Runtime settings. If None, loaded from the environment.
            client: EDACaP client. If None, one is built from the settings.
            clock: Time source for the station cache
        """
        self.settings = settings or load_settings()
        self.client = client or EDACaPClient(
            self.settings.api_base_url, self.settings.timeout_seconds
        )
        self.regions = RegionResolver(
            self.client, match_region(self.settings.region_name, self.settings.region_iso2)
        )
        self.directory = StationDirectory(self.client, self.settings.station_ttl_seconds, clock)
        self.climate_probe = ForecastProbe(
            self.directory,
            self.client.get_climate_forecast,
            is_usable=has_climate_data,
            probe_budget=self.settings.probe_budget,
        )

    async def region(self) -> Region:
        region = await self.regions.resolve_region()
        if region is None:
            raise RegionUnavailableError(MESSAGES["region_unavailable"])
        return region

    def location(self, latitude: Optional[float], longitude: Optional[float]) -> Optional[Tuple[float, float]]:
        """
        Coordinates of the request, falling back to the configured farm location.

        Returns None when no complete coordinate pair is available.
        """
        lat = latitude if latitude is not None else self.settings.default_latitude
        lon = longitude if longitude is not None else self.settings.default_longitude
        if lat is None or lon is None:
            return None

        lat, lon = float(lat), float(lon)
        if not -90 <= lat <= 90:
            raise ValueError(f"Latitude must be between -90 and 90, got {lat}")
        if not -180 <= lon <= 180:
            raise ValueError(f"Longitude must be between -180 and 180, got {lon}")
        return lat, lon

    async def nearest(self, lat: float, lon: float) -> Optional[RankedCandidate]:
        region = await self.region()
        stations = await self.directory.get_stations(region.id)
        return nearest_station(lat, lon, stations)


_service: Optional[ClimateAdvisoryService] = None


def get_service() -> ClimateAdvisoryService:
    """Shared service instance, created on first use."""
    global _service
    if _service is None:
        _service = ClimateAdvisoryService()
    return _service


def set_service(service: Optional[ClimateAdvisoryService]) -> None:
    """Replace the shared service (None resets it to lazy creation)."""
    global _service
    _service = service


def _candidate_info(candidate: RankedCandidate) -> Dict[str, Any]:
    info = candidate.station.to_dict()
    info["distance_km"] = round(candidate.distance_km, 2)
    return info


async def _resolve_station(
    service: ClimateAdvisoryService,
    latitude: Optional[float],
    longitude: Optional[float],
    station_id: Optional[str],
    what: str,
) -> Tuple[Optional[str], Optional[RankedCandidate], Optional[Tuple[float, float]]]:
    """Station id to query: the explicit one, else the nearest to the location."""
    if station_id:
        logger.info(f"Using provided station ID: {station_id}")
        return station_id, None, None

    location = service.location(latitude, longitude)
    if location is None:
        raise ValueError(MESSAGES["missing_location"].format(what=what))

    candidate = await service.nearest(*location)
    if candidate is None:
        return None, None, location
    logger.info(f"Nearest station: {candidate.station.name} ({candidate.station.id}) at {candidate.distance_km:.1f} km")
    return candidate.station.id, candidate, location


def _no_stations(location: Optional[Tuple[float, float]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {"status": "no_stations", "message": MESSAGES["no_stations"]}
    if location:
        result["coordinates"] = {"latitude": location[0], "longitude": location[1]}
    return result


async def get_weather_stations() -> Dict[str, Any]:
    """
    Get the list of weather stations in Ethiopia.

    Returns:
        Dictionary with the country name, station count and, per station,
        its ID, name, coordinates, municipality and state

    Example:
        >>> result = await get_weather_stations()
        >>> print(result['total_stations'])
    """
    service = get_service()
    region = await service.region()
    stations = await service.directory.get_stations(region.id)

    return {
        "status": "success",
        "country": region.name,
        "total_stations": len(stations),
        "stations": [s.to_dict() for s in stations],
    }


async def find_nearest_station(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Find the Ethiopian weather station closest to a location.

    Args:
        latitude: Latitude in decimal degrees (-90 to 90). Defaults to the farm latitude.
        longitude: Longitude in decimal degrees (-180 to 180). Defaults to the farm longitude.

    Returns:
        Dictionary with the station and its distance in km, or status
        "no_stations" when the region has no station with coordinates
    """
    service = get_service()
    location = service.location(latitude, longitude)
    if location is None:
        raise ValueError(MESSAGES["missing_location"].format(what="the nearest station"))

    candidate = await service.nearest(*location)
    if candidate is None:
        return _no_stations(location)

    return {
        "status": "success",
        "location": {"latitude": location[0], "longitude": location[1]},
        "station": _candidate_info(candidate),
    }


async def get_climate_forecast(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    station_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Get the seasonal climate forecast for a location in Ethiopia.

    With coordinates, nearby stations are tried nearest first (up to the
    probe budget, 3 by default) until one has forecast data. With a
    station ID, that station is queried directly.

    Args:
        latitude: Latitude in decimal degrees. Defaults to the farm latitude.
        longitude: Longitude in decimal degrees. Defaults to the farm longitude.
        station_id: Weather station ID (alternative to coordinates)

    Returns:
        Dictionary with below-normal / normal / above-normal probabilities
        per month and measure, or status "no_data" with a suggestion
    """
    service = get_service()

    if station_id:
        logger.info(f"Using provided station ID: {station_id}")
        payload = await service.client.get_climate_forecast(station_id)
        if not has_climate_data(payload):
            result = normalize_climate(payload, station_id)
            result.pop("climate_forecasts")
            result.update(status="no_data", message=MESSAGES["no_station_climate_forecast"])
            return result
        return {"status": "success", **normalize_climate(payload, station_id)}

    location = service.location(latitude, longitude)
    if location is None:
        raise ValueError(MESSAGES["missing_location"].format(what="climate forecasts"))

    region = await service.region()
    outcome = await service.climate_probe.find_forecast(location[0], location[1], region.id)

    if isinstance(outcome, Exhausted):
        return _exhausted_result(outcome, location)

    result = normalize_climate(outcome.payload, outcome.station.id)
    result["status"] = "success"
    result["station_name"] = outcome.station.name
    if outcome.distance_km is not None:
        result["distance_km"] = round(outcome.distance_km, 2)
    result["stations_tried"] = outcome.attempts
    return result


def _exhausted_result(outcome: Exhausted, location: Tuple[float, float]) -> Dict[str, Any]:
    attempted = [{"id": s.id, "name": s.name} for s in outcome.attempted]
    coordinates = {"latitude": location[0], "longitude": location[1]}

    if not outcome.attempted:
        return _no_stations(location)

    errors = dict(outcome.failures)
    if len(errors) == len(outcome.attempted):
        # Every candidate errored: the service is failing, not merely empty.
        return {
            "status": "upstream_unavailable",
            "message": "The EDACaP service could not be reached for any nearby station.",
            "coordinates": coordinates,
            "attempted_stations": attempted,
            "errors": errors,
        }

    result = {
        "status": "no_data",
        "message": MESSAGES["no_climate_forecast"],
        "coordinates": coordinates,
        "suggestion": MESSAGES["suggestion"],
        "attempted_stations": attempted,
    }
    if errors:
        result["errors"] = errors
    return result


async def get_crop_forecast(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    station_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Get the crop yield forecast for a location in Ethiopia.

    Uses the nearest station only (no probing of further stations).

    Args:
        latitude: Latitude in decimal degrees. Defaults to the farm latitude.
        longitude: Longitude in decimal degrees. Defaults to the farm longitude.
        station_id: Weather station ID (alternative to coordinates)

    Returns:
        Dictionary with predictions per cultivar and soil (median, average,
        range, confidence interval)
    """
    service = get_service()
    resolved_id, candidate, location = await _resolve_station(
        service, latitude, longitude, station_id, "crop forecasts"
    )
    if resolved_id is None:
        return _no_stations(location)

    payload = await service.client.get_agronomic_forecast(resolved_id)
    if not has_agronomic_data(payload):
        result = {"status": "no_data", "station_id": resolved_id, "message": MESSAGES["no_crop_forecast"]}
    else:
        result = {"status": "success", **normalize_agronomic(payload, resolved_id)}

    if candidate is not None:
        result["station"] = _candidate_info(candidate)
    return result


async def get_historical_climate(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    station_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Get historical monthly climatology for the station nearest to a location.

    Args:
        latitude: Latitude in decimal degrees. Defaults to the farm latitude.
        longitude: Longitude in decimal degrees. Defaults to the farm longitude.
        station_id: Weather station ID (alternative to coordinates)
    """
    service = get_service()
    resolved_id, candidate, location = await _resolve_station(
        service, latitude, longitude, station_id, "historical climate data"
    )
    if resolved_id is None:
        return _no_stations(location)

    payload = await service.client.get_historical_climate(resolved_id)
    if not has_historical_data(payload):
        result = {"status": "no_data", "station_id": resolved_id, "message": MESSAGES["no_historical_climate"]}
    else:
        result = {"status": "success", **normalize_historical(payload, resolved_id)}

    if candidate is not None:
        result["station"] = _candidate_info(candidate)
    return result


# Export all functions
__all__ = [
    "get_weather_stations",
    "find_nearest_station",
    "get_climate_forecast",
    "get_crop_forecast",
    "get_historical_climate",
]
