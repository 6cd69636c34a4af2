"""
Domain types for the EDACaP climate advisory tools.

Regions and stations are parsed from upstream JSON once and never mutated.
Ranked candidates and probe outcomes are built per request.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union


def as_coordinate(value: Any) -> Optional[float]:
    """Return value as a finite float, or None when it is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def record_id(payload: Any) -> Optional[str]:
    """Upstream id as a string, or None when it is missing, null or blank."""
    if not isinstance(payload, Mapping):
        return None
    value = payload.get("id")
    if value is None or isinstance(value, bool):
        return None
    value = str(value).strip()
    return value or None


def _name_of(record: Any) -> Optional[str]:
    if isinstance(record, Mapping) and record.get("name"):
        return str(record["name"])
    return None


@dataclass(frozen=True)
class Region:
    """A country-level area served by the Aclimate system."""
    id: str
    iso2: str
    name: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Region":
        return cls(
            id=record_id(payload) or "",
            iso2=str(payload.get("iso2") or ""),
            name=str(payload.get("name") or ""),
        )


@dataclass(frozen=True)
class AdministrativePath:
    """Municipality -> state -> country chain, carried for display only."""
    municipality: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def from_municipality(cls, municipality: Any) -> Optional["AdministrativePath"]:
        if not isinstance(municipality, Mapping):
            return None
        state = municipality.get("state")
        country = state.get("country") if isinstance(state, Mapping) else None
        return cls(
            municipality=_name_of(municipality),
            state=_name_of(state),
            country=_name_of(country),
        )


@dataclass(frozen=True)
class Station:
    """A weather station with (possibly missing) coordinates."""
    id: str
    name: str
    latitude: Optional[float]
    longitude: Optional[float]
    ext_id: Optional[str] = None
    origin: Optional[str] = None
    administrative_path: Optional[AdministrativePath] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Station":
        station_id = record_id(payload) or ""
        return cls(
            id=station_id,
            name=str(payload.get("name") or station_id),
            latitude=as_coordinate(payload.get("latitude")),
            longitude=as_coordinate(payload.get("longitude")),
            ext_id=payload.get("ext_id"),
            origin=payload.get("origin"),
            administrative_path=AdministrativePath.from_municipality(payload.get("municipality")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Caller-facing summary, in the shape the station tools return."""
        path = self.administrative_path or AdministrativePath()
        return {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "municipality": path.municipality,
            "state": path.state,
        }


@dataclass(frozen=True)
class RankedCandidate:
    station: Station
    distance_km: float


@dataclass(frozen=True)
class Accepted:
    """A probed station returned usable forecast data."""
    station: Station
    payload: Any
    distance_km: Optional[float] = None
    attempts: int = 1


@dataclass(frozen=True)
class Exhausted:
    """No probed station returned usable data."""
    attempted: Tuple[Station, ...] = ()
    # (station id, error text) for candidates whose fetch failed
    failures: Tuple[Tuple[str, str], ...] = ()


ForecastQueryResult = Union[Accepted, Exhausted]
