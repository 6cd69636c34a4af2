"""
EDACaP Climate Advisory Tools for Ethiopian farmers

This package resolves farm coordinates to Aclimate/EDACaP weather stations and
returns seasonal climate forecasts, crop yield forecasts and historical
climatology, normalized for MCP clients and ADK agents.

Modules:
    - edacap_client: Async HTTP client and error types for the Aclimate Web API
    - station_ranking: Haversine distance and nearest-station ranking
    - station_directory: TTL cache of the region's station list
    - region_resolver: Resolves the supported region's Aclimate id
    - forecast_probe: Nearest-first probing of stations for forecast data
    - forecast_normalizer: Stable output shapes for forecast payloads
    - tool_implementation: The tool functions exposed to agents
    - climate_server: MCP server wrapper for exposing the tools
"""

from .tool_implementation import (
    get_weather_stations,
    find_nearest_station,
    get_climate_forecast,
    get_crop_forecast,
    get_historical_climate,
)

__version__ = "1.0.0"
__all__ = [
    "get_weather_stations",
    "find_nearest_station",
    "get_climate_forecast",
    "get_crop_forecast",
    "get_historical_climate",
]
