# path: route_planner/utils/geo.py

from __future__ import annotations

from typing import List, Tuple
import math


EARTH_RADIUS_KM = 6371.0
KM_TO_MILES = 0.621371

LatLng = Tuple[float, float]


def _to_radians(deg: float) -> float:
    return deg * math.pi / 180


def haversine_km(a_lat: float, a_lng: float, b_lat: float, b_lng: float) -> float:
    # Kept in atan2 form with R = 6371 km; distance read-outs are compared exactly.
    dlat = _to_radians(b_lat - a_lat)
    dlng = _to_radians(b_lng - a_lng)

    a = (
        math.sin(dlat / 2) * math.sin(dlat / 2)
        + math.cos(_to_radians(a_lat)) * math.cos(_to_radians(b_lat))
        * math.sin(dlng / 2) * math.sin(dlng / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def segment_lengths_km(points_latlng: List[LatLng]) -> List[float]:
    out = []
    for i in range(1, len(points_latlng)):
        a_lat, a_lng = points_latlng[i - 1]
        b_lat, b_lng = points_latlng[i]
        out.append(haversine_km(a_lat, a_lng, b_lat, b_lng))
    return out


def polyline_length_km(points_latlng: List[LatLng]) -> float:
    # Plain left-to-right accumulation (sum() compensates on newer interpreters).
    total = 0.0
    for seg in segment_lengths_km(points_latlng):
        total += seg
    return total


def km_to_miles(km: float) -> float:
    return km * KM_TO_MILES


def is_valid_coordinate(lat: float, lng: float) -> bool:
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0
