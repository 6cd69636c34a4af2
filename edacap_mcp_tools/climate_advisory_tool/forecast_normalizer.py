"""
Reshapes EDACaP forecast payloads into the structures returned by the tools.

Fields missing upstream are left out of the output rather than defaulted,
and records that are not JSON objects are dropped.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

CLIMATE_PROBABILITY_LABELS = {
    "lower": "below_normal",
    "normal": "normal",
    "upper": "above_normal",
}

AGRONOMIC_STATISTIC_LABELS = {
    "median": "median",
    "avg": "average",
}


def _records(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _copy_present(source: Mapping[str, Any], target: Dict[str, Any], mapping: Mapping[str, str]) -> Dict[str, Any]:
    for upstream, label in mapping.items():
        if upstream in source and source[upstream] is not None:
            target[label] = source[upstream]
    return target


def _bounds(source: Mapping[str, Any], lower_key: str, upper_key: str, lower: str, upper: str) -> Optional[Dict[str, Any]]:
    bounds = _copy_present(source, {}, {lower_key: lower, upper_key: upper})
    return bounds or None


# --- Climate -----------------------------------------------------------------

def climate_records(payload: Any) -> List[Mapping[str, Any]]:
    if isinstance(payload, Mapping):
        return _records(payload.get("climate"))
    return []


def has_climate_data(payload: Any) -> bool:
    """True when the payload carries at least one climate forecast record."""
    return bool(climate_records(payload))


def _normalize_probability(probability: Mapping[str, Any]) -> Dict[str, Any]:
    result = _copy_present(probability, {}, {"measure": "measure"})
    return _copy_present(probability, result, CLIMATE_PROBABILITY_LABELS)


def _normalize_climate_month(month: Mapping[str, Any]) -> Dict[str, Any]:
    result = _copy_present(month, {}, {"year": "year", "month": "month"})
    result["probabilities"] = [_normalize_probability(p) for p in _records(month.get("probabilities"))]
    return result


def normalize_climate(payload: Any, station_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Seasonal climate forecast, with tercile probabilities relabelled
    below_normal / normal / above_normal.
    """
    result: Dict[str, Any] = {"station_id": station_id}
    if isinstance(payload, Mapping):
        _copy_present(payload, result, {"forecast": "forecast_id", "confidence": "confidence"})

    forecasts = []
    for record in climate_records(payload):
        entry = _copy_present(record, {}, {"weather_station": "weather_station"})
        entry["forecasts"] = [_normalize_climate_month(m) for m in _records(record.get("data"))]
        if record.get("performance") is not None:
            entry["performance"] = record["performance"]
        forecasts.append(entry)

    result["climate_forecasts"] = forecasts
    return result


# --- Agronomic ---------------------------------------------------------------

def agronomic_records(payload: Any) -> List[Mapping[str, Any]]:
    """
    Flatten the yield payload into cultivar/soil records.

    Handles the bare list shape ``[{cultivar, soil, data}]`` as well as the
    nested ``{"yield": [{"weather_station", "yield": [...]}]}`` shape.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("yield")

    records: List[Mapping[str, Any]] = []
    for record in _records(payload):
        nested = record.get("yield")
        if isinstance(nested, list):
            for inner in _records(nested):
                if "weather_station" not in inner and "weather_station" in record:
                    inner = {**inner, "weather_station": record["weather_station"]}
                records.append(inner)
        else:
            records.append(record)
    return records


def has_agronomic_data(payload: Any) -> bool:
    return bool(agronomic_records(payload))


def _normalize_prediction(statistic: Mapping[str, Any]) -> Dict[str, Any]:
    result = _copy_present(statistic, {}, {"measure": "measure"})
    _copy_present(statistic, result, AGRONOMIC_STATISTIC_LABELS)

    value_range = _bounds(statistic, "min", "max", "min", "max")
    if value_range:
        result["range"] = value_range
    confidence = _bounds(statistic, "conf_lower", "conf_upper", "lower", "upper")
    if confidence:
        result["confidence"] = confidence
    return result


def normalize_agronomic(payload: Any, station_id: Optional[str] = None) -> Dict[str, Any]:
    """Crop yield forecast per cultivar and soil."""
    result: Dict[str, Any] = {"station_id": station_id}
    if isinstance(payload, Mapping):
        _copy_present(payload, result, {"forecast": "forecast_id", "confidence": "confidence"})

    crop_forecasts = []
    for record in agronomic_records(payload):
        entry = _copy_present(record, {}, {
            "weather_station": "weather_station",
            "cultivar": "cultivar",
            "soil": "soil",
            "start": "start",
            "end": "end",
        })
        entry["predictions"] = [_normalize_prediction(d) for d in _records(record.get("data"))]
        crop_forecasts.append(entry)

    result["crop_forecasts"] = crop_forecasts
    return result


# --- Historical climatology --------------------------------------------------

def historical_records(payload: Any) -> List[Mapping[str, Any]]:
    if isinstance(payload, Mapping):
        payload = payload.get("climatology", payload.get("data"))
    return _records(payload)


def has_historical_data(payload: Any) -> bool:
    return bool(historical_records(payload))


def _measures(values: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    return {
        str(v["measure"]): v["value"]
        for v in values
        if v.get("measure") is not None and v.get("value") is not None
    }


def normalize_historical(payload: Any, station_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Monthly climatology grouped by station.

    Upstream either nests months under ``monthly_data`` or sends one flat
    ``{weather_station, year, month, data}`` record per month.
    """
    by_station: Dict[Any, Dict[str, Any]] = {}
    for record in historical_records(payload):
        station_key = record.get("weather_station", station_id)
        entry = by_station.setdefault(station_key, {"weather_station": station_key, "months": []})

        months = record.get("monthly_data")
        month_records = _records(months) if isinstance(months, list) else [record]
        for month in month_records:
            row = _copy_present(month, {}, {"year": "year", "month": "month"})
            row["measures"] = _measures(_records(month.get("data")))
            entry["months"].append(row)

    return {"station_id": station_id, "climatology": list(by_station.values())}
