"""
Nearest-station ranking by great-circle distance.
"""

import math
from typing import Iterable, List, Optional

from .models import RankedCandidate, Station, as_coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in km between two points given in decimal degrees.

    Args:
        lat1, lon1: First point
        lat2, lon2: Second point

    Returns:
        Distance in kilometres on a sphere of radius 6371 km
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push a just outside [0, 1] near antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def rank_stations(latitude: float, longitude: float, stations: Iterable[Station]) -> List[RankedCandidate]:
    """
    Order stations nearest first.

    Stations without usable coordinates are left out. Equal distances keep
    the input order. The input is not modified.
    """
    ranked: List[RankedCandidate] = []
    for station in stations:
        s_lat = as_coordinate(station.latitude)
        s_lon = as_coordinate(station.longitude)
        if s_lat is None or s_lon is None:
            continue
        ranked.append(RankedCandidate(station, haversine_km(latitude, longitude, s_lat, s_lon)))

    ranked.sort(key=lambda c: c.distance_km)
    return ranked


def nearest_station(latitude: float, longitude: float, stations: Iterable[Station]) -> Optional[RankedCandidate]:
    """Closest station with coordinates, or None if there is none."""
    ranked = rank_stations(latitude, longitude, stations)
    return ranked[0] if ranked else None
