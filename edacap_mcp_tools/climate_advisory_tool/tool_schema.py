TOOL_SCHEMA = {
  "tool_name": "edacap_climate_advisory",
  "description": "Climate forecasts and agricultural advisory for Ethiopian farmers via the Aclimate/EDACaP Web API. Resolves farm coordinates to nearby weather stations and returns seasonal climate, crop yield and historical climatology data.",
  "supported_region": "Ethiopia",
  "api_documentation": "https://docs.aclimate.org/en/latest/",

  "functions": [
    {
      "name": "get_weather_stations",
      "description": "Lists the weather stations registered for Ethiopia with their IDs, names, coordinates, municipality and state.",
      "parameters": {},
      "endpoint": "/api/Geographic/{country_id}/WeatherStations/json"
    },

    {
      "name": "find_nearest_station",
      "description": "Finds the weather station closest to a location (haversine distance). Useful to obtain a station ID for the other tools.",
      "parameters": {
        "latitude": {
          "type": "number",
          "required": False,
          "description": "Latitude in decimal degrees (e.g., 9.03). Defaults to the configured farm latitude.",
          "range": [-90, 90]
        },
        "longitude": {
          "type": "number",
          "required": False,
          "description": "Longitude in decimal degrees (e.g., 38.74). Defaults to the configured farm longitude.",
          "range": [-180, 180]
        }
      },
      "endpoint": "/api/Geographic/{country_id}/WeatherStations/json"
    },

    {
      "name": "get_climate_forecast",
      "description": "Seasonal climate forecast for a location. Tries up to 3 nearby stations (configurable) until one has forecast data. Returns below-normal / normal / above-normal probabilities per month and measure.",
      "parameters": {
        "latitude": {"type": "number", "required": False, "range": [-90, 90]},
        "longitude": {"type": "number", "required": False, "range": [-180, 180]},
        "station_id": {
          "type": "string",
          "required": False,
          "description": "Weather station ID (alternative to coordinates). Skips the nearby-station search."
        }
      },
      "endpoint": "/api/Forecast/Climate/{station_id}/true/json"
    },

    {
      "name": "get_crop_forecast",
      "description": "Crop yield forecast for the station nearest to a location, per cultivar and soil: median, average, range and confidence interval.",
      "parameters": {
        "latitude": {"type": "number", "required": False, "range": [-90, 90]},
        "longitude": {"type": "number", "required": False, "range": [-180, 180]},
        "station_id": {"type": "string", "required": False}
      },
      "endpoint": "/api/Forecast/Yield/{station_id}/json"
    },

    {
      "name": "get_historical_climate",
      "description": "Historical monthly climatology for the station nearest to a location.",
      "parameters": {
        "latitude": {"type": "number", "required": False, "range": [-90, 90]},
        "longitude": {"type": "number", "required": False, "range": [-180, 180]},
        "station_id": {"type": "string", "required": False}
      },
      "endpoint": "/api/Historical/Climatology/{station_id}/json"
    }
  ],

  "usage_workflow": {
    "step_1": {
      "action": "find_nearest_station OR get_weather_stations",
      "purpose": "Station discovery",
      "input": "Farm location (lat/lon)",
      "output": "Station ID, name, distance"
    },
    "step_2": {
      "action": "get_climate_forecast OR get_crop_forecast OR get_historical_climate",
      "purpose": "Seasonal outlook and crop advisory",
      "input": "Coordinates or station ID from step 1",
      "output": "Normalized forecast"
    }
  },

  "messages": {
    "region_unavailable": "Ethiopia is not available in the EDACaP system at this time.",
    "missing_location": "Please provide coordinates or a station ID to get {what}.",
    "no_stations": "No weather stations with coordinates are registered for this region.",
    "no_climate_forecast": "No seasonal climate forecast data is currently available for your location. The EDACaP system does not have active weather stations with forecast data near your coordinates. For current weather, please use Tomorrow.io or AccuWeather instead.",
    "no_station_climate_forecast": "No climate forecast data available for this station at this time.",
    "no_crop_forecast": "No crop yield forecast data available for this station at this time.",
    "no_historical_climate": "No historical climate data available for this station.",
    "suggestion": "Try asking for current weather or weekly forecast instead"
  },

  "error_handling": {
    "UpstreamError": "The EDACaP service returned an error status. Reported with status_code; do not suggest alternatives.",
    "UpstreamConnectionError": "The EDACaP service could not be reached.",
    "UpstreamTimeoutError": "The EDACaP service did not answer in time (service slow, not necessarily down).",
    "RegionUnavailableError": "The configured region is not offered by EDACaP; location tools are unavailable for this deployment.",
    "no_data": "Not an error: the stations near the location carry no forecast. Suggest other weather sources."
  }
}

MESSAGES = TOOL_SCHEMA["messages"]
